"""Typed tool inputs. Field names match the ``GmailClient`` keyword arguments."""

from __future__ import annotations

from dataclasses import dataclass, field

FORMATS = ["full", "metadata", "minimal", "raw"]
THREAD_FORMATS = ["full", "metadata", "minimal"]
MESSAGE_LIST_VISIBILITY = ["show", "hide"]
LABEL_LIST_VISIBILITY = ["labelShow", "labelShowIfUnread", "labelHide"]


def arg(description: str, default=None, enum: list[str] | None = None):
    """Optional tool argument."""
    return field(default=default, metadata={"description": description, "enum": enum})


def required(description: str, enum: list[str] | None = None):
    return field(metadata={"description": description, "enum": enum})


@dataclass
class ToolResult:
    """Rendered outcome of one tool call."""

    text: str
    is_error: bool = False


@dataclass
class EmptyInput:
    pass


@dataclass
class IdInput:
    id: str = required("ID of the message, draft, label or thread the tool acts on")


@dataclass
class ListFilterInput:
    q: str | None = arg('Gmail search query (e.g., "from:user@example.com is:unread", "after:2026/01/01")')
    label_ids: list[str] | None = arg('Filter by label IDs (e.g., ["INBOX"], ["UNREAD"])')
    max_results: int | None = arg("Maximum number of results to return (max 500)")
    page_token: str | None = arg("Token for the next page of results (nextPageToken of a previous response)")
    include_spam_trash: bool = arg("Include results from SPAM and TRASH", default=False)


@dataclass
class GetMessageInput:
    id: str = required("The message ID")
    format: str | None = arg("Response format", enum=FORMATS)
    metadata_headers: list[str] | None = arg(
        'Headers to include when format=metadata (e.g., ["From", "Subject"])'
    )


@dataclass
class GetWithFormatInput:
    id: str = required("ID of the draft or thread")
    format: str | None = arg("Response format", enum=FORMATS)


@dataclass
class GetThreadInput:
    id: str = required("The thread ID")
    format: str | None = arg("Response format", enum=THREAD_FORMATS)


@dataclass
class SendMessageInput:
    to: str = required("Recipient address(es), comma-separated")
    subject: str = required("Subject line")
    body: str = required("Plain text body")
    cc: str | None = arg("CC recipient(s), comma-separated")
    bcc: str | None = arg("BCC recipient(s), comma-separated")
    html: str | None = arg("HTML body, sent as multipart/alternative with the plain text")
    in_reply_to: str | None = arg("Message-ID header of the message being replied to")
    references: str | None = arg("References header (space-separated Message-IDs)")
    thread_id: str | None = arg("Thread ID to add the message to")


@dataclass
class DraftInput:
    to: str = required("Recipient address(es), comma-separated")
    subject: str = required("Subject line")
    body: str = required("Plain text body")
    cc: str | None = arg("CC recipient(s), comma-separated")
    bcc: str | None = arg("BCC recipient(s), comma-separated")
    html: str | None = arg("HTML body, sent as multipart/alternative with the plain text")
    thread_id: str | None = arg("Thread ID the draft belongs to")


@dataclass
class UpdateDraftInput:
    id: str = required("The draft ID to replace")
    to: str = required("Recipient address(es), comma-separated")
    subject: str = required("Subject line")
    body: str = required("Plain text body")
    cc: str | None = arg("CC recipient(s), comma-separated")
    bcc: str | None = arg("BCC recipient(s), comma-separated")
    html: str | None = arg("HTML body, sent as multipart/alternative with the plain text")
    thread_id: str | None = arg("Thread ID the draft belongs to")


@dataclass
class ModifyLabelsInput:
    id: str = required("ID of the message or thread to modify")
    add_label_ids: list[str] | None = arg('Label IDs to add (e.g., ["STARRED"])')
    remove_label_ids: list[str] | None = arg('Label IDs to remove (e.g., ["UNREAD"] to mark as read)')


@dataclass
class BatchDeleteInput:
    ids: list[str] = required("Message IDs to delete permanently (max 1000)")


@dataclass
class BatchModifyInput:
    ids: list[str] = required("Message IDs to modify (max 1000)")
    add_label_ids: list[str] | None = arg("Label IDs to add")
    remove_label_ids: list[str] | None = arg("Label IDs to remove")


@dataclass
class GetAttachmentInput:
    message_id: str = required("ID of the message holding the attachment")
    attachment_id: str = required("Attachment ID from the message payload parts")


@dataclass
class ListDraftsInput:
    max_results: int | None = arg("Maximum number of drafts to return")
    page_token: str | None = arg("Token for the next page of results")
    q: str | None = arg("Only return drafts matching this Gmail search query")


@dataclass
class CreateLabelInput:
    name: str = required('Label name; use "/" for nesting (e.g., "Projects/Active")')
    message_list_visibility: str | None = arg(
        "Show or hide messages with this label in the message list", enum=MESSAGE_LIST_VISIBILITY,
    )
    label_list_visibility: str | None = arg(
        "Visibility of the label in the label list", enum=LABEL_LIST_VISIBILITY,
    )
    background_color: str | None = arg("Background color as hex (e.g., #16a765)")
    text_color: str | None = arg("Text color as hex (e.g., #ffffff)")


@dataclass
class UpdateLabelInput:
    id: str = required("The label ID")
    name: str | None = arg("New label name")
    message_list_visibility: str | None = arg(
        "Show or hide messages with this label in the message list", enum=MESSAGE_LIST_VISIBILITY,
    )
    label_list_visibility: str | None = arg(
        "Visibility of the label in the label list", enum=LABEL_LIST_VISIBILITY,
    )
    background_color: str | None = arg("Background color as hex")
    text_color: str | None = arg("Text color as hex")


@dataclass
class VacationInput:
    enable_auto_reply: bool = required("Turn the auto-reply on or off")
    response_subject: str | None = arg("Subject of the auto-reply")
    response_body_plain_text: str | None = arg("Plain text body of the auto-reply")
    response_body_html: str | None = arg("HTML body of the auto-reply")
    restrict_to_contacts: bool | None = arg("Only reply to people in your contacts")
    restrict_to_domain: bool | None = arg("Only reply to people in your domain")
    start_time: str | None = arg("Start time in epoch milliseconds")
    end_time: str | None = arg("End time in epoch milliseconds")
