"""Interactive command-line interface for Mimir."""

import os
import uuid

from groq import AsyncGroq

from .agent import AgentResponse, MemoryAgent
from .config import AgentConfig, MemoryConfig, config_from_env
from .logging import JSONLLogger, configure_logger, get_logger
from .memory import MemoryRecord, MemoryService
from .provider import CompletionProvider, GroqCompletionProvider

BANNER = """
╔══════════════════════════════════════════╗
║            Mimir v0.1.0                  ║
║    Memory Injection Demonstration        ║
╚══════════════════════════════════════════╝

Commands:
  /exit, /quit     - Exit the CLI
  /reset           - Start a new session (memories are kept)
  /memories        - List everything the agent remembers
  /search <query>  - Search memories
  /recall          - Toggle answering with relevant memories
  /help            - Show this help

Try: "Remember that my favorite color is blue"
"""


class CLI:
    """Interactive command-line interface for Mimir."""

    def __init__(
        self,
        provider: CompletionProvider | None = None,
        config: AgentConfig | None = None,
        memory_config: MemoryConfig | None = None,
        audit_logger: JSONLLogger | None = None,
    ) -> None:
        if config is None or memory_config is None:
            env_agent_config, env_memory_config = config_from_env()
            config = config or env_agent_config
            memory_config = memory_config or env_memory_config

        if provider is None:
            groq_client = AsyncGroq(api_key=os.getenv("GROQ_API_KEY"))
            provider = GroqCompletionProvider(groq_client, default_model=config.model)

        self.logger = audit_logger or get_logger()
        self.agent = MemoryAgent(
            provider,
            MemoryService(config=memory_config),
            config=config,
            audit_logger=self.logger,
        )
        self.session_id = self._new_session_id()
        self.use_memory = True

    def _new_session_id(self) -> str:
        """Generate a new session ID."""
        return f"cli-{uuid.uuid4().hex[:8]}"

    def _reset(self) -> None:
        old_session_id = self.session_id
        self.agent.sessions.clear(old_session_id)
        self.session_id = self._new_session_id()
        self.logger.set_session_id(self.session_id)
        self.logger.log("session_reset", old_session_id=old_session_id)
        print(f"\n✓ Session reset. New session: {self.session_id}")

    def _format_response(self, response: AgentResponse) -> str:
        """Format the agent's response for display."""
        output = ["\n" + "─" * 40]
        output.append(response.output)
        output.append("─" * 40)

        if response.from_command:
            output.append("⚠ Stored directly from a memory command (no model review)")
        elif response.memories_used:
            output.append(f"🧠 Used {len(response.memories_used)} memory item(s)")

        update = response.memory_update
        if update is not None and update.updated:
            output.append(f"📝 Memory updated: {len(update.updates)} item(s)")

        return "\n".join(output)

    def _format_memories(self, records: list[MemoryRecord]) -> str:
        if not records:
            return "\n(no memories)"
        lines = [f"  [{r.id[:8]}] {r.description}: {r.content}" for r in records]
        return "\n" + "\n".join(lines)

    async def _process_message(self, message: str) -> None:
        """Process a user message through the agent."""
        try:
            if self.use_memory:
                response = await self.agent.generate_response_with_memory(
                    message, session_id=self.session_id
                )
            else:
                response = await self.agent.generate_response(
                    message, session_id=self.session_id
                )
            print(self._format_response(response))

        except Exception as e:
            print(f"\n❌ Error: {e}")
            self.logger.log("error", error=str(e))

    def _handle_command(self, command: str) -> bool:
        """Handle a special command. Returns True if should continue, False to exit."""
        cmd, _, arg = command.strip().partition(" ")
        cmd = cmd.lower()

        if cmd in ("/exit", "/quit", "exit", "quit"):
            print("\n👋 Goodbye!")
            self.logger.log("session_end")
            return False

        if cmd == "/reset":
            self._reset()
            return True

        if cmd == "/memories":
            print(self._format_memories(self.agent.get_all_memories()))
            return True

        if cmd == "/search":
            try:
                print(self._format_memories(self.agent.search_memories(arg)))
            except ValueError as e:
                print(f"\n❌ {e}")
            return True

        if cmd == "/recall":
            self.use_memory = not self.use_memory
            print(f"\nMemory recall {'on' if self.use_memory else 'off'}")
            return True

        if cmd == "/help":
            print(BANNER)
            return True

        return True  # Unknown command, continue

    async def run(self) -> None:
        """Run the interactive CLI."""
        print(BANNER)
        print(f"Session: {self.session_id}\n")
        self.logger.set_session_id(self.session_id)
        self.logger.log("session_start")

        while True:
            try:
                user_input = input("you> ").strip()

                if not user_input:
                    continue

                if user_input.startswith("/") or user_input.lower() in ("exit", "quit"):
                    if not self._handle_command(user_input):
                        break
                    continue

                await self._process_message(user_input)

            except (KeyboardInterrupt, EOFError):
                print("\n👋 Goodbye!")
                self.logger.log("session_interrupt")
                break


async def run_cli() -> None:
    """Run the CLI with default configuration."""
    configure_logger()

    if not os.getenv("GROQ_API_KEY"):
        print("❌ Error: GROQ_API_KEY environment variable not set")
        print("Please set it in your .env file or environment")
        return

    cli = CLI()
    await cli.run()
