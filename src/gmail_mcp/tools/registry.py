"""Tool registry: name -> typed input -> ``GmailClient`` method."""

from __future__ import annotations

import dataclasses
import json
import logging
import types
import typing
from dataclasses import dataclass
from typing import Any, Mapping

from gmail_mcp.exceptions import GmailMcpError, ToolInputError, UnknownOperationError
from gmail_mcp.gmail.client import GmailClient
from gmail_mcp.tools import models as m

logger = logging.getLogger(__name__)

_JSON_TYPES = {str: "string", int: "integer", float: "number", bool: "boolean"}


@dataclass(frozen=True)
class ToolSpec:
    """One externally callable operation.

    Args:
        name: Tool name seen by callers.
        method: ``GmailClient`` method the tool invokes.
        input_type: Dataclass describing the accepted arguments.
    """

    name: str
    title: str
    description: str
    method: str
    input_type: type
    read_only: bool = False
    destructive: bool = False
    idempotent: bool = False

    def input_schema(self) -> dict:
        """JSON Schema for the tool arguments, derived from ``input_type``."""
        hints = typing.get_type_hints(self.input_type)
        properties = {}
        required = []
        for f in dataclasses.fields(self.input_type):
            prop = _json_schema(_unwrap_optional(hints[f.name]))
            prop["description"] = f.metadata.get("description", "")
            if f.metadata.get("enum"):
                prop["enum"] = list(f.metadata["enum"])
            properties[f.name] = prop
            if _is_required(f):
                required.append(f.name)
        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return schema


def _is_required(f: dataclasses.Field) -> bool:
    return f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING


def _unwrap_optional(hint):
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _json_schema(hint) -> dict:
    if typing.get_origin(hint) is list:
        (item,) = typing.get_args(hint)
        return {"type": "array", "items": _json_schema(item)}
    return {"type": _JSON_TYPES[hint]}


def _coerce(name: str, hint, value):
    if hint is bool:
        if isinstance(value, bool):
            return value
    elif hint is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
    elif hint is str:
        if isinstance(value, str):
            return value
        # Epoch timestamps and numeric IDs often arrive as JSON numbers.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
    elif typing.get_origin(hint) is list:
        (item,) = typing.get_args(hint)
        if isinstance(value, (list, tuple)):
            return [_coerce(name, item, v) for v in value]
    raise ToolInputError(f"Argument '{name}' must be of type {_json_schema(hint)['type']}")


def parse_arguments(input_type: type, args: Mapping[str, Any]):
    """Validate raw tool arguments into an ``input_type`` instance.

    Unknown keys are ignored; ``None`` counts as absent.
    """
    hints = typing.get_type_hints(input_type)
    values = {}
    for f in dataclasses.fields(input_type):
        value = args.get(f.name)
        if value is None:
            if _is_required(f):
                raise ToolInputError(f"Missing required argument: {f.name}")
            continue
        hint = _unwrap_optional(hints[f.name])
        value = _coerce(f.name, hint, value)
        enum = f.metadata.get("enum")
        if enum and value not in enum:
            raise ToolInputError(f"Argument '{f.name}' must be one of: {', '.join(enum)}")
        values[f.name] = value
    return input_type(**values)


TOOLS: list[ToolSpec] = [
    # Messages
    ToolSpec(
        "gmail_list_messages", "List Messages",
        "List messages in the mailbox. Supports Gmail search syntax for filtering "
        "(e.g., from:, to:, subject:, is:unread, has:attachment).",
        "list_messages", m.ListFilterInput, read_only=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_get_message", "Get Message",
        "Get a specific message by ID. Returns headers, body, labels, and metadata. "
        "Use format=full for parsed body or format=raw for RFC 2822.",
        "get_message", m.GetMessageInput, read_only=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_send_message", "Send Message",
        "Send an email message. Supports plain text and HTML body, CC, BCC, and replying to threads.",
        "send_message", m.SendMessageInput,
    ),
    ToolSpec(
        "gmail_delete_message", "Delete Message",
        "Permanently delete a message. This is irreversible; use gmail_trash_message for safe deletion.",
        "delete_message", m.IdInput, destructive=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_trash_message", "Trash Message",
        "Move a message to the trash. Can be undone with gmail_untrash_message.",
        "trash_message", m.IdInput, idempotent=True,
    ),
    ToolSpec(
        "gmail_untrash_message", "Untrash Message",
        "Remove a message from the trash, restoring it to its original location.",
        "untrash_message", m.IdInput, idempotent=True,
    ),
    ToolSpec(
        "gmail_modify_message", "Modify Message Labels",
        "Add or remove labels on a message. Use this to mark as read/unread, star/unstar, "
        "or apply custom labels.",
        "modify_message", m.ModifyLabelsInput, idempotent=True,
    ),
    ToolSpec(
        "gmail_batch_delete", "Batch Delete Messages",
        "Permanently delete multiple messages at once. Maximum 1000 IDs per request. Irreversible.",
        "batch_delete_messages", m.BatchDeleteInput, destructive=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_batch_modify", "Batch Modify Messages",
        "Add or remove labels on multiple messages at once. Maximum 1000 IDs per request.",
        "batch_modify_messages", m.BatchModifyInput, idempotent=True,
    ),
    ToolSpec(
        "gmail_get_attachment", "Get Attachment",
        "Get attachment data for a message. Returns base64url-encoded data. "
        "Find attachment IDs in the message payload parts.",
        "get_attachment", m.GetAttachmentInput, read_only=True, idempotent=True,
    ),
    # Drafts
    ToolSpec(
        "gmail_list_drafts", "List Drafts",
        "List all drafts in the mailbox.",
        "list_drafts", m.ListDraftsInput, read_only=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_get_draft", "Get Draft",
        "Get a specific draft by ID, including the draft message content.",
        "get_draft", m.GetWithFormatInput, read_only=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_create_draft", "Create Draft",
        "Create a new draft email. The draft can be sent later with gmail_send_draft.",
        "create_draft", m.DraftInput,
    ),
    ToolSpec(
        "gmail_update_draft", "Update Draft",
        "Update an existing draft with new content. Replaces the entire draft message.",
        "update_draft", m.UpdateDraftInput, idempotent=True,
    ),
    ToolSpec(
        "gmail_delete_draft", "Delete Draft",
        "Delete a draft. This permanently removes the draft.",
        "delete_draft", m.IdInput, destructive=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_send_draft", "Send Draft",
        "Send an existing draft. The draft is removed from the drafts list after sending.",
        "send_draft", m.IdInput,
    ),
    # Labels
    ToolSpec(
        "gmail_list_labels", "List Labels",
        "List all labels in the mailbox, including system labels (INBOX, SENT, etc.) "
        "and user-created labels.",
        "list_labels", m.EmptyInput, read_only=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_get_label", "Get Label",
        "Get details for a specific label, including message and thread counts.",
        "get_label", m.IdInput, read_only=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_create_label", "Create Label",
        "Create a new user label for organizing messages.",
        "create_label", m.CreateLabelInput,
    ),
    ToolSpec(
        "gmail_update_label", "Update Label",
        "Update a label name, visibility, or color.",
        "update_label", m.UpdateLabelInput, idempotent=True,
    ),
    ToolSpec(
        "gmail_delete_label", "Delete Label",
        "Delete a user-created label. System labels cannot be deleted. "
        "Messages with this label are not deleted.",
        "delete_label", m.IdInput, destructive=True, idempotent=True,
    ),
    # Threads
    ToolSpec(
        "gmail_list_threads", "List Threads",
        "List email threads (conversations). Supports the same search syntax as gmail_list_messages.",
        "list_threads", m.ListFilterInput, read_only=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_get_thread", "Get Thread",
        "Get all messages in a thread (conversation). Returns the complete email chain.",
        "get_thread", m.GetThreadInput, read_only=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_modify_thread", "Modify Thread Labels",
        "Add or remove labels on all messages in a thread.",
        "modify_thread", m.ModifyLabelsInput, idempotent=True,
    ),
    ToolSpec(
        "gmail_trash_thread", "Trash Thread",
        "Move all messages in a thread to the trash.",
        "trash_thread", m.IdInput, idempotent=True,
    ),
    ToolSpec(
        "gmail_untrash_thread", "Untrash Thread",
        "Remove all messages in a thread from the trash.",
        "untrash_thread", m.IdInput, idempotent=True,
    ),
    # Settings
    ToolSpec(
        "gmail_get_profile", "Get Profile",
        "Get the authenticated user's Gmail profile: email address, total message count, "
        "total thread count, and history ID.",
        "get_profile", m.EmptyInput, read_only=True, idempotent=True,
    ),
    ToolSpec(
        "gmail_update_vacation", "Update Vacation Responder",
        "Enable or disable vacation auto-reply (out of office) with a custom response message.",
        "update_vacation", m.VacationInput, idempotent=True,
    ),
]

_TOOLS_BY_NAME = {spec.name: spec for spec in TOOLS}


def get_tool(name: str) -> ToolSpec:
    try:
        return _TOOLS_BY_NAME[name]
    except KeyError:
        raise UnknownOperationError(name) from None


async def dispatch(client: GmailClient, name: str, args: Mapping[str, Any]) -> Any:
    """Validate ``args`` for tool ``name`` and run it against ``client``."""
    spec = get_tool(name)
    params = parse_arguments(spec.input_type, args)
    logger.debug(f"Calling {spec.method} for tool {name}")
    method = getattr(client, spec.method)
    return await method(**dataclasses.asdict(params))


def render_result(result: Any) -> str:
    if result is None:
        return '{"success": true}'
    return json.dumps(result, indent=2)


async def call_tool(client: GmailClient, name: str, args: Mapping[str, Any]) -> m.ToolResult:
    """Run a tool and render the outcome; failures become error results."""
    try:
        result = await dispatch(client, name, args)
    except GmailMcpError as e:
        return m.ToolResult(f"Error: {e}", is_error=True)
    except Exception as e:
        logger.exception(f"Unexpected failure in tool {name}")
        return m.ToolResult(f"Error: {e}", is_error=True)
    return m.ToolResult(render_result(result))
