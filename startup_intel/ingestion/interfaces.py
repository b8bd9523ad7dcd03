"""Interface definitions for page fetching."""


class FetchError(Exception):
    """Base class for page fetch failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnreachableUrl(FetchError):
    """The site could not be reached (DNS, refused, reset, timeout, ...)."""

    def __init__(self, url: str, reason: str = ""):
        message = "Could not reach the website URL to scrape. Please check the URL and try again."
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.url = url
        self.reason = reason


class FetchNotOk(FetchError):
    """The site answered with a non-success HTTP status."""

    def __init__(self, url: str, status: int, status_text: str = ""):
        super().__init__(f"Failed to fetch website: {status} {status_text}".rstrip())
        self.url = url
        self.status = status
        self.status_text = status_text


class FetcherInterface:
    """Interface for page fetching."""

    async def fetch(self, url: str) -> str:
        """Fetch a single page and return its HTML."""
        raise NotImplementedError
