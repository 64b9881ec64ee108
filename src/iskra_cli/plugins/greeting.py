from ..core.registry import CommandSpec


class Greeter:
    """Handlers bound to one owner instance; the specs below name its methods."""

    def __init__(self, greeting: str = "hello") -> None:
        self.greeting = greeting

    def greet(self, params: list[str], flags: frozenset[str] | None, args: dict[str, str]) -> str:
        """Greet someone by name.

        Args:
            params: ``[name]``.
            args: ``loud=true`` shouts the greeting.
        """

        name = params[0] if params else "stranger"
        text = f"{self.greeting}, {name}!"
        if args.get("loud") == "true" or (flags and "loud" in flags):
            text = text.upper()
        return text

    def farewell(self, params: list[str], flags: frozenset[str] | None, args: dict[str, str]) -> str:
        """Say goodbye."""
        return f"goodbye, {params[0] if params else 'stranger'}."


OWNER = Greeter()

COMMANDS = [
    CommandSpec("greet", "greet", required_params=1, required_args=frozenset({"loud"})),
    CommandSpec("farewell", "farewell", required_params=1, aliases=frozenset({"bye"})),
]
