"""
Main module for the Ollama chat client: argument parsing and the input loop.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

import yaml

from ollama_chat.chat_service import ChatService
from ollama_chat.config import Configuration
from ollama_chat.llm.client import OllamaChatClient
from ollama_chat.logging_utils import setup_logging

EXIT_COMMANDS = frozenset({"exit", "quit"})
PROMPT = "You: "
FAREWELL = "\nBot: Goodbye!"
RULE = "-" * 66
EXIT_CONFIG_ERROR = 1
EXIT_INTERRUPTED = 130


def trim_newline(line: str) -> str:
    """Drop one trailing newline, then one trailing carriage return."""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def read_line(stream: TextIO) -> str:
    """Read one line, raising EOFError once the stream is exhausted."""
    line = stream.readline()
    if line == "":
        raise EOFError("end of input stream")
    return line


def run_chat_loop(
    service: ChatService,
    input_stream: TextIO | None = None,
    output: TextIO | None = None,
) -> int:
    """
    Prompt for input and run turns until the user types exit or quit.

    Input errors are logged and the prompt is shown again; the loop only
    returns on an exit command.

    Returns:
        Process exit code (always 0).
    """
    input_stream = input_stream if input_stream is not None else sys.stdin
    output = output if output is not None else sys.stdout

    while True:
        print(PROMPT, end="", file=output, flush=True)
        try:
            user_input = read_line(input_stream)
        except (EOFError, OSError, UnicodeDecodeError) as e:
            logging.error(f"Error reading user input: {e}")
            continue

        user_input = trim_newline(user_input)
        if user_input in EXIT_COMMANDS:
            print(FAREWELL, file=output, flush=True)
            return 0

        service.send(user_input)


def build_parser(default_model: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ollama-chat",
        description="Chat with a local Ollama model from the terminal.",
    )
    parser.add_argument(
        "-model",
        "--model",
        default=default_model,
        help=f"The name of the Ollama model to use (default: {default_model})",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point - interactive terminal chat."""
    try:
        config = Configuration()
        log_level = config.get_logging_config()["level"]
        http_config = config.get_http_client_config()
        chat_url = config.chat_url
        default_model = config.default_model
    except (OSError, ValueError, yaml.YAMLError) as e:
        setup_logging()
        logging.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG_ERROR

    setup_logging(log_level)
    args = build_parser(default_model).parse_args(argv)

    print(RULE)
    print(f"Starting chatbot with model: {args.model}. Type 'exit' or 'quit' to end.")
    print(RULE)

    with OllamaChatClient(chat_url, timeout=http_config["timeout"]) as client:
        service = ChatService(client, args.model)
        try:
            return run_chat_loop(service)
        except KeyboardInterrupt:
            logging.info("Keyboard interrupt received, shutting down...")
            return EXIT_INTERRUPTED


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
