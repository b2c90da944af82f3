"""Gmail API v1 client over the authenticated request pipeline."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote, urlencode

from gmail_mcp.config import DEFAULT_TIMEOUT, GMAIL_API_BASE, GOOGLE_TOKEN_URL, Credential
from gmail_mcp.gmail.auth import CredentialManager
from gmail_mcp.gmail.message import OutgoingMessage, build_raw_message
from gmail_mcp.gmail.pipeline import RequestPipeline
from gmail_mcp.gmail.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


def _with_query(path: str, params: dict[str, Any]) -> str:
    """Append the truthy ``params`` to ``path``; lists become repeated keys."""
    pairs = []
    for key, value in params.items():
        if not value:
            continue
        if isinstance(value, bool):
            value = "true"
        pairs.append((key, value))
    qs = urlencode(pairs, doseq=True)
    return f"{path}?{qs}" if qs else path


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _label_payload(
    name: str | None,
    message_list_visibility: str | None,
    label_list_visibility: str | None,
    background_color: str | None,
    text_color: str | None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if name:
        payload["name"] = name
    if message_list_visibility:
        payload["messageListVisibility"] = message_list_visibility
    if label_list_visibility:
        payload["labelListVisibility"] = label_list_visibility
    if background_color or text_color:
        payload["color"] = {
            "backgroundColor": background_color,
            "textColor": text_color,
        }
    return payload


class GmailClient:
    """Async Gmail API client for the ``me`` user.

    Every method maps its arguments onto one call of
    :meth:`RequestPipeline.execute` and returns the decoded JSON response.
    Errors from the pipeline propagate unchanged.

    Args:
        pipeline: Authenticated request pipeline.
    """

    USER = "/users/me"

    def __init__(self, pipeline: RequestPipeline):
        self.pipeline = pipeline

    @classmethod
    def from_credential(
        cls,
        credential: Credential,
        transport: Transport | None = None,
        api_base: str = GMAIL_API_BASE,
        token_url: str = GOOGLE_TOKEN_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> GmailClient:
        """Wire a client, token manager and transport for one account."""
        transport = transport or HttpxTransport(timeout=timeout)
        manager = CredentialManager(credential, transport, token_url=token_url)
        return cls(RequestPipeline(manager, transport, base_url=api_base))

    @property
    def credential(self) -> Credential:
        return self.pipeline.credentials.credential

    async def aclose(self) -> None:
        """Close the underlying transport if it holds connections."""
        close = getattr(self.pipeline.transport, "aclose", None)
        if close is not None:
            await close()

    async def _send_raw(
        self,
        path: str,
        method: str,
        message: OutgoingMessage,
        thread_id: str | None,
        wrap_in_message: bool,
    ) -> dict:
        body: dict[str, Any] = {"raw": build_raw_message(message)}
        if thread_id:
            body["threadId"] = thread_id
        payload = {"message": body} if wrap_in_message else body
        return await self.pipeline.execute_json(path, method, payload)

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    async def list_messages(
        self,
        q: str | None = None,
        label_ids: list[str] | None = None,
        max_results: int | None = None,
        page_token: str | None = None,
        include_spam_trash: bool = False,
    ) -> dict:
        """List message references; ``page_token`` continues a previous listing."""
        path = _with_query(f"{self.USER}/messages", {
            "q": q,
            "labelIds": label_ids,
            "maxResults": max_results,
            "pageToken": page_token,
            "includeSpamTrash": include_spam_trash,
        })
        return await self.pipeline.execute(path)

    async def get_message(
        self,
        id: str,
        format: str | None = None,
        metadata_headers: list[str] | None = None,
    ) -> dict:
        path = _with_query(f"{self.USER}/messages/{_segment(id)}", {
            "format": format,
            "metadataHeaders": metadata_headers,
        })
        return await self.pipeline.execute(path)

    async def send_message(
        self,
        to: str,
        subject: str,
        body: str,
        cc: str | None = None,
        bcc: str | None = None,
        html: str | None = None,
        in_reply_to: str | None = None,
        references: str | None = None,
        thread_id: str | None = None,
    ) -> dict:
        """Send a new message, optionally as a reply within ``thread_id``."""
        message = OutgoingMessage(
            to=to, subject=subject, body=body, cc=cc, bcc=bcc, html=html,
            in_reply_to=in_reply_to, references=references,
        )
        return await self._send_raw(
            f"{self.USER}/messages/send", "POST", message, thread_id, wrap_in_message=False,
        )

    async def delete_message(self, id: str) -> None:
        """Permanently delete a message. Not recoverable."""
        await self.pipeline.execute(f"{self.USER}/messages/{_segment(id)}", "DELETE")

    async def trash_message(self, id: str) -> dict:
        return await self.pipeline.execute(f"{self.USER}/messages/{_segment(id)}/trash", "POST")

    async def untrash_message(self, id: str) -> dict:
        return await self.pipeline.execute(f"{self.USER}/messages/{_segment(id)}/untrash", "POST")

    async def modify_message(
        self,
        id: str,
        add_label_ids: list[str] | None = None,
        remove_label_ids: list[str] | None = None,
    ) -> dict:
        return await self.pipeline.execute_json(f"{self.USER}/messages/{_segment(id)}/modify", "POST", {
            "addLabelIds": add_label_ids or [],
            "removeLabelIds": remove_label_ids or [],
        })

    async def batch_delete_messages(self, ids: list[str]) -> None:
        await self.pipeline.execute_json(f"{self.USER}/messages/batchDelete", "POST", {"ids": ids})

    async def batch_modify_messages(
        self,
        ids: list[str],
        add_label_ids: list[str] | None = None,
        remove_label_ids: list[str] | None = None,
    ) -> None:
        await self.pipeline.execute_json(f"{self.USER}/messages/batchModify", "POST", {
            "ids": ids,
            "addLabelIds": add_label_ids or [],
            "removeLabelIds": remove_label_ids or [],
        })

    async def get_attachment(self, message_id: str, attachment_id: str) -> dict:
        """Fetch attachment data (base64url in the ``data`` field)."""
        return await self.pipeline.execute(
            f"{self.USER}/messages/{_segment(message_id)}/attachments/{_segment(attachment_id)}"
        )

    # -------------------------------------------------------------------------
    # Drafts
    # -------------------------------------------------------------------------

    async def list_drafts(
        self,
        max_results: int | None = None,
        page_token: str | None = None,
        q: str | None = None,
    ) -> dict:
        path = _with_query(f"{self.USER}/drafts", {
            "maxResults": max_results,
            "pageToken": page_token,
            "q": q,
        })
        return await self.pipeline.execute(path)

    async def get_draft(self, id: str, format: str | None = None) -> dict:
        path = _with_query(f"{self.USER}/drafts/{_segment(id)}", {"format": format})
        return await self.pipeline.execute(path)

    async def create_draft(
        self,
        to: str,
        subject: str,
        body: str,
        cc: str | None = None,
        bcc: str | None = None,
        html: str | None = None,
        thread_id: str | None = None,
    ) -> dict:
        message = OutgoingMessage(to=to, subject=subject, body=body, cc=cc, bcc=bcc, html=html)
        return await self._send_raw(
            f"{self.USER}/drafts", "POST", message, thread_id, wrap_in_message=True,
        )

    async def update_draft(
        self,
        id: str,
        to: str,
        subject: str,
        body: str,
        cc: str | None = None,
        bcc: str | None = None,
        html: str | None = None,
        thread_id: str | None = None,
    ) -> dict:
        """Replace the whole content of an existing draft."""
        message = OutgoingMessage(to=to, subject=subject, body=body, cc=cc, bcc=bcc, html=html)
        return await self._send_raw(
            f"{self.USER}/drafts/{_segment(id)}", "PUT", message, thread_id, wrap_in_message=True,
        )

    async def delete_draft(self, id: str) -> None:
        await self.pipeline.execute(f"{self.USER}/drafts/{_segment(id)}", "DELETE")

    async def send_draft(self, id: str) -> dict:
        return await self.pipeline.execute_json(f"{self.USER}/drafts/send", "POST", {"id": id})

    # -------------------------------------------------------------------------
    # Labels
    # -------------------------------------------------------------------------

    async def list_labels(self) -> dict:
        return await self.pipeline.execute(f"{self.USER}/labels")

    async def get_label(self, id: str) -> dict:
        return await self.pipeline.execute(f"{self.USER}/labels/{_segment(id)}")

    async def create_label(
        self,
        name: str,
        message_list_visibility: str | None = None,
        label_list_visibility: str | None = None,
        background_color: str | None = None,
        text_color: str | None = None,
    ) -> dict:
        payload = _label_payload(
            name, message_list_visibility, label_list_visibility, background_color, text_color,
        )
        return await self.pipeline.execute_json(f"{self.USER}/labels", "POST", payload)

    async def update_label(
        self,
        id: str,
        name: str | None = None,
        message_list_visibility: str | None = None,
        label_list_visibility: str | None = None,
        background_color: str | None = None,
        text_color: str | None = None,
    ) -> dict:
        payload = {"id": id}
        payload.update(_label_payload(
            name, message_list_visibility, label_list_visibility, background_color, text_color,
        ))
        return await self.pipeline.execute_json(f"{self.USER}/labels/{_segment(id)}", "PUT", payload)

    async def delete_label(self, id: str) -> None:
        """Delete a user label. Messages carrying it are kept."""
        await self.pipeline.execute(f"{self.USER}/labels/{_segment(id)}", "DELETE")

    # -------------------------------------------------------------------------
    # Threads
    # -------------------------------------------------------------------------

    async def list_threads(
        self,
        q: str | None = None,
        label_ids: list[str] | None = None,
        max_results: int | None = None,
        page_token: str | None = None,
        include_spam_trash: bool = False,
    ) -> dict:
        path = _with_query(f"{self.USER}/threads", {
            "q": q,
            "labelIds": label_ids,
            "maxResults": max_results,
            "pageToken": page_token,
            "includeSpamTrash": include_spam_trash,
        })
        return await self.pipeline.execute(path)

    async def get_thread(self, id: str, format: str | None = None) -> dict:
        path = _with_query(f"{self.USER}/threads/{_segment(id)}", {"format": format})
        return await self.pipeline.execute(path)

    async def modify_thread(
        self,
        id: str,
        add_label_ids: list[str] | None = None,
        remove_label_ids: list[str] | None = None,
    ) -> dict:
        return await self.pipeline.execute_json(f"{self.USER}/threads/{_segment(id)}/modify", "POST", {
            "addLabelIds": add_label_ids or [],
            "removeLabelIds": remove_label_ids or [],
        })

    async def trash_thread(self, id: str) -> dict:
        return await self.pipeline.execute(f"{self.USER}/threads/{_segment(id)}/trash", "POST")

    async def untrash_thread(self, id: str) -> dict:
        return await self.pipeline.execute(f"{self.USER}/threads/{_segment(id)}/untrash", "POST")

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    async def get_profile(self) -> dict:
        return await self.pipeline.execute(f"{self.USER}/profile")

    async def update_vacation(
        self,
        enable_auto_reply: bool,
        response_subject: str | None = None,
        response_body_plain_text: str | None = None,
        response_body_html: str | None = None,
        restrict_to_contacts: bool | None = None,
        restrict_to_domain: bool | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
    ) -> dict:
        """Turn the vacation auto-reply on or off.

        ``start_time`` and ``end_time`` are epoch milliseconds as strings.
        """
        settings = {
            "enableAutoReply": enable_auto_reply,
            "responseSubject": response_subject,
            "responseBodyPlainText": response_body_plain_text,
            "responseBodyHtml": response_body_html,
            "restrictToContacts": restrict_to_contacts,
            "restrictToDomain": restrict_to_domain,
            "startTime": start_time,
            "endTime": end_time,
        }
        payload = {k: v for k, v in settings.items() if v is not None}
        return await self.pipeline.execute_json(f"{self.USER}/settings/vacation", "PUT", payload)
