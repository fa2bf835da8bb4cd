"""Transport seam for generated client bindings."""

from .types import NamedFile, RequestOpts


class BotBase:
    """Base class for generated clients.

    Generated methods assemble the request and decode the response; the
    round trip itself is delegated to request(), which subclasses implement
    on top of their HTTP library of choice.

    Example:
        class Bot(GeneratedBot):
            def request(self, method, params, parts, opts):
                if parts is None:
                    r = httpx.post(f"{API}/{method}", data=params)
                else:
                    r = httpx.post(f"{API}/{method}", data=params, files=...)
                return r.content
    """

    def request(
        self,
        method: str,
        params: dict[str, str],
        parts: dict[str, NamedFile] | None,
        opts: RequestOpts | None,
    ) -> bytes:
        """Send a request and return the raw result payload.

        Args:
            method: The API method name.
            params: Flat string parameters of the request.
            parts: Side-channel binary parts, or None for requests without
                file or media fields. A dict (even empty) asks for a
                multi-part request.
            opts: Per-request transport options.

        Returns:
            The JSON encoded result of the call.
        """
        raise NotImplementedError("request() must be implemented by the transport")
