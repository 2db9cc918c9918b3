"""
App Invite Client

Async HTTP client for the app invite API.
"""

from typing import Any, Dict, List, Optional, Union

import httpx


class AppInviteClientError(Exception):
    """Error response from the app invite API"""

    def __init__(self, status_code: int, code: str, message: str):
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(f"{status_code} {code}: {message}")


class AppInviteClient:
    """
    Thin wrapper over httpx.AsyncClient.

    Pass an existing AsyncClient (e.g. one bound to an ASGI transport) or a
    base_url to have one created. Methods return decoded JSON bodies and
    raise AppInviteClientError on non-2xx responses.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        access_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        prefix: str = "/app-invitations",
    ):
        if client is None and base_url is None:
            raise ValueError("Either base_url or client is required")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url)
        self.access_token = access_token
        self.prefix = prefix

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def invite_user(
        self,
        email: Optional[str] = None,
        name: Optional[str] = None,
        resend: bool = False,
        domain_whitelist: Optional[Union[str, List[str]]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"resend": resend}
        if email is not None:
            payload["email"] = email
        if name is not None:
            payload["name"] = name
        if domain_whitelist is not None:
            payload["domain_whitelist"] = domain_whitelist
        return await self._request("POST", "", json=payload)

    async def accept_invitation(
        self,
        invitation_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        **additional_fields: Any,
    ) -> Dict[str, Any]:
        payload = {
            key: value
            for key, value in dict(
                name=name, email=email, password=password, **additional_fields
            ).items()
            if value is not None
        }
        body = await self._request(
            "POST", f"/{invitation_id}/accept", json=payload, authenticated=False
        )
        # Auto sign-in: later calls act as the new user
        if body.get("access_token"):
            self.access_token = body["access_token"]
        return body

    async def reject_invitation(self, invitation_id: str) -> Dict[str, Any]:
        return await self._request("POST", f"/{invitation_id}/reject")

    async def cancel_invitation(self, invitation_id: str) -> Dict[str, Any]:
        return await self._request("POST", f"/{invitation_id}/cancel")

    async def get_app_invitation(self, invitation_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/{invitation_id}", authenticated=False)

    async def list_invitations(self, **query: Any) -> Dict[str, Any]:
        """
        List the caller's invitations.

        Keyword arguments are the query parameters: limit, offset,
        search_field, search_operator, search_value, filter_field,
        filter_operator, filter_value, sort_by, sort_direction.
        """
        params = {key: value for key, value in query.items() if value is not None}
        return await self._request("GET", "", params=params)

    async def _request(
        self, method: str, path: str, authenticated: bool = True, **kwargs
    ) -> Dict[str, Any]:
        headers = {}
        if authenticated and self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        response = await self._client.request(
            method, f"{self.prefix}{path}", headers=headers, **kwargs
        )

        if response.is_error:
            raise self._error_from(response)
        return response.json()

    @staticmethod
    def _error_from(response: httpx.Response) -> AppInviteClientError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return AppInviteClientError(
                response.status_code, error.get("code", "UNKNOWN"), error.get("message", "")
            )
        # FastAPI HTTPException / validation errors use "detail"
        detail = body.get("detail", response.text) if isinstance(body, dict) else response.text
        return AppInviteClientError(response.status_code, "HTTP_ERROR", str(detail))
