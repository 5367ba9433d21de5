"""
Command Tree

Console input is resolved word by word against a fixed tree of command
nodes. A node that owns a handler ends the walk: whatever tokens follow
it are handed to the handler untouched, which is how
`add expense Groceries 12.50` and `add sheet My Budget` carry their
free-form arguments.

The tree is built once by build_command_tree() and never changes.
"""

from typing import Callable, NamedTuple, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from budget_tracker.console import handlers


HELP_TOKEN = "help"
ROOT_WORD = "root"


class CommandNode(BaseModel):
    """One word of the command hierarchy."""
    model_config = ConfigDict(frozen=True)

    word: str = Field(..., min_length=1)
    description: str
    children: tuple["CommandNode", ...] = ()
    handler: Optional[Callable[..., None]] = None

    @property
    def accepts_tail(self) -> bool:
        return self.handler is not None

    def with_child(self, child: "CommandNode") -> "CommandNode":
        return self.model_copy(update={"children": self.children + (child,)})

    def child(self, word: str) -> Optional["CommandNode"]:
        for node in self.children:
            if node.word == word:
                return node
        return None


CommandNode.model_rebuild()


class Resolution(NamedTuple):
    """Result of resolving tokens: the node, the words that led to it, the rest."""
    node: CommandNode
    path: tuple[str, ...]
    tail: tuple[str, ...]


class CommandTree:
    """Read-only command registry rooted at a synthetic root node."""

    def __init__(self, root: CommandNode):
        self._root = root

    @property
    def root(self) -> CommandNode:
        return self._root

    def resolve(self, tokens: Sequence[str]) -> Optional[Resolution]:
        """
        Walk the tree along tokens.

        Returns None when a word matches no child of the current node.
        """
        node = self._root
        path: list[str] = []
        remaining = list(tokens)

        while remaining:
            if node.accepts_tail:
                break
            child = node.child(remaining[0])
            if child is None:
                return None
            node = child
            path.append(remaining.pop(0))

        return Resolution(node, tuple(path), tuple(remaining))

    def render_help(self, resolution: Resolution) -> str:
        node, path, _ = resolution
        if path:
            lines = [f"? HELP: {' '.join(path)}"]
        else:
            lines = ["? A budget tracker CLI application.", "?  Available commands:"]

        lines.append(f"?   {node.description}")

        if node.children:
            lines.append("? SUBCOMMANDS:")
            for child in node.children:
                lines.append(f"?   {child.word} - {child.description}")

        return "\n".join(lines)


def help_context(tokens: Sequence[str]) -> Optional[list[str]]:
    """Tokens before the first 'help' token, or None if there is none."""
    if HELP_TOKEN not in tokens:
        return None
    return list(tokens[: list(tokens).index(HELP_TOKEN)])


def build_command_tree() -> CommandTree:
    root = (
        CommandNode(word=ROOT_WORD, description="Budget tracker CLI.")
        .with_child(
            CommandNode(word="add", description="Add a new record to the budget tracker.")
            .with_child(CommandNode(
                word="expense",
                description="Add an expense to the active sheet: add expense [category amount].",
                handler=handlers.add_expense_handler,
            ))
            .with_child(CommandNode(
                word="sheet",
                description="Create a sheet for the current month: add sheet [name].",
                handler=handlers.add_sheet_handler,
            ))
        )
        .with_child(
            CommandNode(word="delete", description="Delete a record from the budget tracker.")
            .with_child(CommandNode(
                word="sheet",
                description="Delete a sheet: delete sheet [name].",
                handler=handlers.delete_sheet_handler,
            ))
            .with_child(CommandNode(
                word="expense",
                description="Delete an expense from the active sheet: delete expense [index].",
                handler=handlers.delete_expense_handler,
            ))
        )
        .with_child(
            CommandNode(word="show", description="Show data from the budget tracker.")
            .with_child(CommandNode(
                word="expenses",
                description="Show a summary of the active sheet.",
                handler=handlers.show_expenses_handler,
            ))
            .with_child(CommandNode(
                word="sheets",
                description="List all sheets.",
                handler=handlers.show_sheets_handler,
            ))
            .with_child(CommandNode(
                word="categories",
                description="List expense categories.",
                handler=handlers.show_categories_handler,
            ))
        )
        .with_child(CommandNode(
            word="select",
            description="Select the active sheet: select <name>.",
            handler=handlers.select_handler,
        ))
    )
    return CommandTree(root)
