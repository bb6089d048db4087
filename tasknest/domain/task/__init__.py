"""Task domain - the task tree model.

All exports are pure (no I/O). The only side effect of the mutating
methods is on the task objects themselves.

Key Types:
    Task - Tree node owning its subtasks and message channel
    TaskPatch - Typed partial update of the user-editable fields
    TaskType / TaskUrgency - Task enumerations
    TaskMessage / MessageReaction / MessageAttachment - Channel records
    TaskLink / TaskAttachment - Task references
    TaskColor - Four-part palette

Traversal Functions:
    walk / walk_with_depth - Depth-first iteration over a forest
    filter_nodes / find_first / find_by_id / depth_of - Searches
    matches_query - Name/notes search predicate
    count_descendants / count_completed_descendants - Aggregates

Channel Functions:
    toggle_star / toggle_pin / toggle_reaction / reply
    pinned_first / starred / delete_messages / format_transcript
"""

from .channel import (
    delete_messages,
    format_transcript,
    get_reply_target,
    pinned_first,
    reply,
    starred,
    toggle_pin,
    toggle_reaction,
    toggle_star,
)
from .color import (
    DEFAULT_TASK_COLOR,
    PASTEL_COLORS,
    TaskColor,
    adjust_color_brightness,
    get_palette,
    inherit_color,
    is_valid_hex,
)
from .models import (
    COLOR_MESSAGE,
    COMPLETED_MESSAGE,
    CREATED_MESSAGE,
    DEFAULT_AUTHOR,
    DEFAULT_CATEGORIES,
    DEFAULT_CATEGORY,
    MAX_TASK_DEPTH,
    REOPENED_MESSAGE,
    SYSTEM_AUTHOR,
    URGENCY_HORIZON,
    AttachmentKind,
    MessageAttachment,
    MessageAttachmentKind,
    MessageKind,
    MessageReaction,
    Task,
    TaskAttachment,
    TaskLink,
    TaskMessage,
    TaskPatch,
    TaskType,
    TaskUrgency,
)
from .traversal import (
    collect_categories,
    count_completed_descendants,
    count_descendants,
    filter_nodes,
    depth_of,
    find_by_id,
    find_first,
    matches_query,
    walk,
    walk_with_depth,
)

__all__ = [
    # Models
    "Task",
    "TaskPatch",
    "TaskType",
    "TaskUrgency",
    "TaskLink",
    "TaskAttachment",
    "AttachmentKind",
    "TaskMessage",
    "MessageKind",
    "MessageReaction",
    "MessageAttachment",
    "MessageAttachmentKind",
    "CREATED_MESSAGE",
    "COMPLETED_MESSAGE",
    "REOPENED_MESSAGE",
    "COLOR_MESSAGE",
    "DEFAULT_AUTHOR",
    "DEFAULT_CATEGORIES",
    "DEFAULT_CATEGORY",
    "MAX_TASK_DEPTH",
    "SYSTEM_AUTHOR",
    "URGENCY_HORIZON",
    # Colour
    "TaskColor",
    "DEFAULT_TASK_COLOR",
    "PASTEL_COLORS",
    "adjust_color_brightness",
    "inherit_color",
    "get_palette",
    "is_valid_hex",
    # Traversal
    "walk",
    "walk_with_depth",
    "filter_nodes",
    "find_first",
    "find_by_id",
    "depth_of",
    "matches_query",
    "count_descendants",
    "count_completed_descendants",
    "collect_categories",
    # Channel
    "toggle_star",
    "toggle_pin",
    "toggle_reaction",
    "reply",
    "get_reply_target",
    "pinned_first",
    "starred",
    "delete_messages",
    "format_transcript",
]
