"""View module - headless chat screen state."""

from .chat_view import ChatView, ViewState, MessageBubble, SidebarEntry, format_time_label, create_chat_view

__all__ = ['ChatView', 'ViewState', 'MessageBubble', 'SidebarEntry', 'format_time_label', 'create_chat_view']
