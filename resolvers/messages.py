"""
Direct messages between users.

Every operation acts on behalf of the signed-in user; the graph layer
resolves that user from the session before calling in here. Sender and
receiver are both stored as ``{id: <user ObjectId>, role: "Student"|"Admin"}``.
"""

import logging
from typing import Any, Dict, List

from auth import SessionUser
from database import DocumentStore, utcnow
from errors import AuthorizationError, NotFoundError
from schemas import Message, SenderRole, User, collection_name

from resolvers import common

logger = logging.getLogger(__name__)

MESSAGES = collection_name(Message)


def _party_role(role: str) -> SenderRole:
    return SenderRole(role.capitalize())


def _serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
    return common.serialize(doc, Message)


def _participant_filter(user_oid) -> Dict[str, Any]:
    return {"$or": [{"sender.id": user_oid}, {"receiver.id": user_oid}]}


def get_all(store: DocumentStore, user: SessionUser) -> List[Dict[str, Any]]:
    """Messages the user sent or received, newest first."""
    me = common.parse_id(user.user_id, "user")
    docs = store.get_documents(MESSAGES, _participant_filter(me), sort=[("timestamp", -1)])
    return [_serialize(d) for d in docs]


def get_one(store: DocumentStore, user: SessionUser, message_id: str) -> Dict[str, Any]:
    oid = common.parse_id(message_id, "message")
    me = common.parse_id(user.user_id, "user")
    doc = store.find_one(MESSAGES, {"_id": oid, **_participant_filter(me)})
    if doc is None:
        raise NotFoundError("Message not found")
    return _serialize(doc)


def get_between(store: DocumentStore, user: SessionUser, other_user_id: str) -> List[Dict[str, Any]]:
    """Conversation with one other user, oldest first."""
    me = common.parse_id(user.user_id, "user")
    other = common.parse_id(other_user_id, "user")
    query = {
        "$or": [
            {"sender.id": me, "receiver.id": other},
            {"sender.id": other, "receiver.id": me},
        ]
    }
    docs = store.get_documents(MESSAGES, query, sort=[("timestamp", 1)])
    return [_serialize(d) for d in docs]


def create(store: DocumentStore, user: SessionUser, fields: Dict[str, Any]) -> Dict[str, Any]:
    receiver_oid = common.parse_id(fields.get("receiver_id"), "receiver")
    receiver = store.find_by_id(collection_name(User), receiver_oid)
    if receiver is None:
        raise NotFoundError("Receiver not found")

    message = common.validate_model(Message, {
        "content": fields.get("content", ""),
        "sender": {"id": user.user_id, "role": _party_role(user.role)},
        "receiver": {"id": str(receiver_oid), "role": _party_role(receiver["role"])},
        "timestamp": utcnow(),
        "read": False,
    })
    doc = common.to_document(message)
    doc["sender"]["id"] = common.parse_id(user.user_id, "user")
    doc["receiver"]["id"] = receiver_oid
    new_id = store.create_document(MESSAGES, doc)
    logger.info("Message %s sent from %s to %s", new_id, user.user_id, receiver_oid)
    return _serialize(store.find_by_id(MESSAGES, common.parse_id(new_id)))


def mark_read(store: DocumentStore, user: SessionUser, message_id: str) -> Dict[str, Any]:
    oid = common.parse_id(message_id, "message")
    me = common.parse_id(user.user_id, "user")
    doc = store.find_one(MESSAGES, {"_id": oid, "receiver.id": me})
    if doc is None:
        raise NotFoundError("Message not found or you are not authorized to mark it as read")
    if doc.get("read"):
        return _serialize(doc)
    return _serialize(store.update_by_id(MESSAGES, oid, {"read": True}))


def mark_all_read(store: DocumentStore, user: SessionUser, sender_id: str) -> int:
    """Mark every unread message from ``sender_id`` to the user; returns how many changed."""
    me = common.parse_id(user.user_id, "user")
    sender = common.parse_id(sender_id, "sender")
    count = store.update_many(MESSAGES, {"sender.id": sender, "receiver.id": me, "read": False}, {"read": True})
    logger.info("Marked %d messages from %s as read for %s", count, sender_id, user.user_id)
    return count


def delete(store: DocumentStore, user: SessionUser, message_id: str) -> Dict[str, Any]:
    oid = common.parse_id(message_id, "message")
    doc = store.find_by_id(MESSAGES, oid)
    if doc is None:
        raise NotFoundError("Message not found")
    if str(doc["sender"]["id"]) != user.user_id:
        raise AuthorizationError("Only the sender can delete a message")
    return common.remove(store, Message, message_id)
