"""Data service backed by a hosted Supabase project."""

import logging
from collections.abc import Callable, Sequence

import httpx
from supabase import (
    AsyncClient,
    AuthError,
    PostgrestAPIError,
    StorageException,
    acreate_client,
)

from ...errors import AuthenticationError, NetworkError
from ...utils.text import escape_like
from ..base import Filter, FilterOp, OrderBy, Session, SessionListener

logger = logging.getLogger(__name__)

# Everything the supabase client raises for a failed call
SERVICE_ERRORS = (PostgrestAPIError, StorageException, AuthError, httpx.HTTPError)


def _to_session(auth_session) -> Session | None:
    if auth_session is None or auth_session.user is None:
        return None
    return Session(
        user_id=auth_session.user.id,
        email=auth_session.user.email,
        access_token=auth_session.access_token,
        refresh_token=auth_session.refresh_token,
    )


def _filter_value(value):
    return getattr(value, "value", value)


class SupabaseDataService:
    """Passthrough to the Supabase tables, storage buckets and auth."""

    def __init__(self, client: AsyncClient, email_redirect_to: str | None = None):
        self.client = client
        self.email_redirect_to = email_redirect_to
        self._subscriptions = []

    @classmethod
    async def connect(
        cls, url: str, key: str, email_redirect_to: str | None = None
    ) -> "SupabaseDataService":
        """Create the async Supabase client for ``url``."""
        client = await acreate_client(url, key)
        return cls(client, email_redirect_to=email_redirect_to)

    async def query_records(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        order_by: OrderBy | None = None,
    ) -> list[dict]:
        request = self.client.table(table).select("*")
        for flt in filters:
            if flt.op is FilterOp.EQ:
                request = request.eq(flt.field, _filter_value(flt.value))
            elif flt.op is FilterOp.ILIKE:
                request = request.ilike(flt.field, f"%{escape_like(str(flt.value))}%")
            elif flt.op is FilterOp.IN:
                request = request.in_(flt.field, [_filter_value(v) for v in flt.value])
        if order_by is not None:
            request = request.order(order_by.field, desc=not order_by.ascending)

        try:
            response = await request.execute()
        except SERVICE_ERRORS as exc:
            logger.error("Error querying %s: %s", table, exc)
            raise NetworkError(f"Query on {table} failed: {exc}") from exc
        return response.data or []

    async def insert_record(self, table: str, fields: dict) -> dict:
        payload = {k: _filter_value(v) for k, v in fields.items()}
        try:
            response = await self.client.table(table).insert(payload).execute()
        except SERVICE_ERRORS as exc:
            logger.error("Error inserting into %s: %s", table, exc)
            raise NetworkError(f"Insert into {table} failed: {exc}") from exc
        if not response.data:
            raise NetworkError(f"Insert into {table} returned no row")
        return response.data[0]

    async def update_record(self, table: str, record_id: str, fields: dict) -> dict:
        payload = {k: _filter_value(v) for k, v in fields.items() if k != "id"}
        try:
            response = await (
                self.client.table(table).update(payload).eq("id", record_id).execute()
            )
        except SERVICE_ERRORS as exc:
            logger.error("Error updating %s %s: %s", table, record_id, exc)
            raise NetworkError(f"Update of {table} failed: {exc}") from exc
        if not response.data:
            raise NetworkError(f"No {table} record with id {record_id}")
        return response.data[0]

    async def delete_record(self, table: str, record_id: str) -> None:
        try:
            await self.client.table(table).delete().eq("id", record_id).execute()
        except SERVICE_ERRORS as exc:
            logger.error("Error deleting %s %s: %s", table, record_id, exc)
            raise NetworkError(f"Delete from {table} failed: {exc}") from exc

    async def upload_blob(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        file_options = {"content-type": content_type} if content_type else None
        storage = self.client.storage.from_(bucket)
        try:
            await storage.upload(key, data, file_options)
            return await storage.get_public_url(key)
        except SERVICE_ERRORS as exc:
            logger.error("Error uploading %s/%s: %s", bucket, key, exc)
            raise NetworkError(f"Upload to {bucket} failed: {exc}") from exc

    async def sign_in(self, email: str, password: str) -> Session:
        try:
            response = await self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise AuthenticationError(exc.message) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Sign-in failed: {exc}") from exc
        session = _to_session(response.session)
        if session is None:
            raise AuthenticationError("No session issued")
        return session

    async def sign_up(
        self, email: str, password: str, username: str | None = None
    ) -> Session | None:
        options: dict = {"data": {"username": username or email.split("@")[0]}}
        if self.email_redirect_to:
            options["email_redirect_to"] = self.email_redirect_to
        try:
            response = await self.client.auth.sign_up(
                {"email": email, "password": password, "options": options}
            )
        except AuthError as exc:
            raise AuthenticationError(exc.message) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Sign-up failed: {exc}") from exc
        # No session until the confirmation email is followed
        return _to_session(response.session)

    async def sign_out(self) -> None:
        try:
            await self.client.auth.sign_out()
        except SERVICE_ERRORS as exc:
            raise NetworkError(f"Sign-out failed: {exc}") from exc

    async def restore_session(self, session: Session) -> Session | None:
        if not session.access_token or not session.refresh_token:
            return None
        try:
            response = await self.client.auth.set_session(
                session.access_token, session.refresh_token
            )
        except AuthError as exc:
            logger.info("Stored session could not be restored: %s", exc.message)
            return None
        except httpx.HTTPError as exc:
            raise NetworkError(f"Session restore failed: {exc}") from exc
        return _to_session(response.session)

    async def get_current_session(self) -> Session | None:
        try:
            auth_session = await self.client.auth.get_session()
        except SERVICE_ERRORS as exc:
            raise NetworkError(f"Could not read session: {exc}") from exc
        return _to_session(auth_session)

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        def handle(event, auth_session) -> None:
            logger.debug("Auth state change: %s", event)
            callback(_to_session(auth_session))

        subscription = self.client.auth.on_auth_state_change(handle)
        self._subscriptions.append(subscription)
        return subscription.unsubscribe

    async def close(self) -> None:
        """Drop the auth listeners registered through this service."""
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions.clear()
