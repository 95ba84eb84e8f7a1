from __future__ import annotations

from enum import StrEnum


class TagType(StrEnum):
    SUB_TOPIC = "subTopic"


class Product(StrEnum):
    COMMUNITY = "community"


class ConversationPermission(StrEnum):
    READ_CONVERSATION = "readConversation"
    UPDATE_CONVERSATION = "updateConversation"
    DELETE_CONVERSATION = "deleteConversation"
    CREATE_MESSAGE = "createMessage"
    READ_MESSAGE = "readMessage"
    UPDATE_MESSAGE = "updateMessage"
    DELETE_MESSAGE = "deleteMessage"
    RESOLVE_MESSAGE = "resolveMessage"
    INVITE_USER = "inviteUser"
    REMOVE_USER = "removeUser"
