from __future__ import annotations

BROWSER_USER_AGENTS: dict[str, str] = {
    "chrome": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/129.0.0.0 Safari/537.36"
    ),
    "firefox": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:131.0) "
        "Gecko/20100101 Firefox/131.0"
    ),
    "safari": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_6_1) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.6 Safari/605.1.15"
    ),
}

DEFAULT_BROWSER = "chrome"


def user_agent_for(browser: str | None = DEFAULT_BROWSER) -> str:
    key = (browser or DEFAULT_BROWSER).lower()
    return BROWSER_USER_AGENTS.get(key, BROWSER_USER_AGENTS[DEFAULT_BROWSER])


def resolve_user_agent(custom: str | None = None, browser: str | None = None) -> str:
    """Return the User-Agent header for a run.

    A custom string takes precedence over the browser preference.
    """
    if custom:
        return custom
    return user_agent_for(browser)
