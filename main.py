#!/usr/bin/env python3
"""
Main entry point for Baklava Bot

Run the chat API server, an interactive chat on the terminal, or answer a
single message.
"""

import sys
import logging
from pathlib import Path

# Add the project directory to the Python path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import Config
from utils.logger import AssistantLogger

def run_server(host="0.0.0.0", port=5000, use_mock=False, model=None):
    """Run the Flask API server"""
    from src.api.flask_server import BaklavaBotAPI

    logger = logging.getLogger(__name__)
    logger.info("Starting Baklava Bot...")

    api = BaklavaBotAPI(use_mock=use_mock, model_name=model)
    try:
        api.run(host=host, port=port)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    finally:
        api.shutdown()

def run_chat(use_mock=False, model=None):
    """Interactive chat on stdin/stdout"""
    from src.assistant.baklava_bot import BaklavaBot

    bot = BaklavaBot(use_mock=use_mock, model_name=model)
    session_id = None
    print("Baklava Bot is ready. Type 'exit' to quit.")
    try:
        while True:
            try:
                message = input("you> ").strip()
            except EOFError:
                break
            if message.lower() in ("exit", "quit"):
                break
            if not message:
                continue
            session, reply = bot.chat(session_id, message)
            session_id = session.session_id
            print(f"bot> {reply}")
    finally:
        bot.shutdown()

def ask(message, use_mock=False, model=None):
    """Answer a single message with no prior conversation"""
    from src.assistant.baklava_bot import BaklavaBot

    bot = BaklavaBot(use_mock=use_mock, model_name=model)
    try:
        return bot.handle_turn([], message)
    finally:
        bot.shutdown()

def main():
    """Main CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(description='Baklava Bot - calendar chat assistant')
    parser.add_argument('--mock', action='store_true', help='Use the in-memory calendar and scripted LLM')
    parser.add_argument('--model', default=None, help=f'Model name (default: {Config.DEFAULT_MODEL})')
    parser.add_argument('--log-level', default='INFO', help='Logging level')
    parser.add_argument('--log-file', default=None, help='Also write logs to this file')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Server command
    server_parser = subparsers.add_parser('server', help='Run the chat API server')
    server_parser.add_argument('--host', default=Config.API_HOST, help='Host to bind to')
    server_parser.add_argument('--port', type=int, default=Config.API_PORT, help='Port to bind to')

    # Chat command
    subparsers.add_parser('chat', help='Chat interactively in the terminal')

    # Ask command (for single message)
    ask_parser = subparsers.add_parser('ask', help='Answer a single message')
    ask_parser.add_argument('message', help='Message to send')

    args = parser.parse_args()
    AssistantLogger.setup_logging(log_level=args.log_level, log_file=args.log_file)

    if args.command == 'server':
        run_server(host=args.host, port=args.port, use_mock=args.mock, model=args.model)

    elif args.command == 'chat':
        run_chat(use_mock=args.mock, model=args.model)

    elif args.command == 'ask':
        print(ask(args.message, use_mock=args.mock, model=args.model))

    else:
        parser.print_help()

if __name__ == '__main__':
    main()
