"""
Flask API server for Baklava Bot
"""
import logging
import signal
import sys
import time
from datetime import datetime

from flask import Flask, request, jsonify
from flask_cors import CORS

from config.settings import Config
from src.assistant.baklava_bot import BaklavaBot
from utils.validators import RequestValidator, DataSanitizer

logger = logging.getLogger(__name__)

class BaklavaBotAPI:
    """
    Flask API server exposing the chat turn
    """

    def __init__(self, bot: BaklavaBot = None, use_mock: bool = False, model_name: str = None):
        self.config = Config()
        self.app = Flask(__name__)
        CORS(self.app)

        self.bot = bot or BaklavaBot(use_mock=use_mock, model_name=model_name)
        self.start_time = time.time()
        self.turns_handled = 0

        self._setup_routes()

    def _setup_routes(self):
        """Setup Flask routes"""

        @self.app.route('/health', methods=['GET'])
        def health_check():
            """Health check endpoint"""
            return jsonify({
                "status": "healthy",
                "timestamp": datetime.now().isoformat(),
                "sessions": len(self.bot.sessions),
                "turns_handled": self.turns_handled,
                "uptime": round(time.time() - self.start_time, 1)
            })

        @self.app.route('/chat', methods=['POST'])
        def chat():
            """Handle one user message"""
            data = request.get_json(silent=True)
            errors = RequestValidator.validate_chat_request(data)
            if errors:
                logger.warning(f"Rejected chat request: {errors}")
                return jsonify({"error": "; ".join(errors)}), 400

            message = DataSanitizer.sanitize_text(data["message"])
            logger.info(f"💬 RECEIVED MESSAGE for session {data.get('session_id', 'new')}: {message[:100]}")

            session, reply = self.bot.chat(data.get("session_id"), message)
            self.turns_handled += 1
            return jsonify({"session_id": session.session_id, "reply": reply})

        @self.app.route('/sessions/<session_id>/history', methods=['GET'])
        def get_history(session_id):
            session = self.bot.sessions.find(session_id)
            if session is None:
                return jsonify({"error": "Session not found"}), 404
            return jsonify({
                "session_id": session_id,
                "history": [message.to_dict() for message in session.history]
            })

        @self.app.route('/sessions/<session_id>', methods=['DELETE'])
        def reset_session(session_id):
            if not self.bot.sessions.reset(session_id):
                return jsonify({"error": "Session not found"}), 404
            return jsonify({"session_id": session_id, "reset": True})

        @self.app.errorhandler(404)
        def not_found(error):
            return jsonify({"error": "Endpoint not found"}), 404

        @self.app.errorhandler(500)
        def internal_error(error):
            return jsonify({"error": "Internal server error"}), 500

    def _setup_signal_handlers(self):
        """Setup graceful shutdown handlers"""
        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, shutting down gracefully...")
            self.shutdown()
            sys.exit(0)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def run(self, host=None, port=None, debug=False):
        """Run the Flask server"""
        host = host or self.config.API_HOST
        port = port or self.config.API_PORT

        self._setup_signal_handlers()
        logger.info(f"Starting Baklava Bot API server on {host}:{port}")

        self.app.run(
            host=host,
            port=port,
            debug=debug,
            threaded=True,
            use_reloader=False
        )

    def shutdown(self):
        """Graceful shutdown"""
        logger.info("Shutting down Baklava Bot API server...")
        self.bot.shutdown()

def create_app(bot: BaklavaBot = None, use_mock: bool = False) -> Flask:
    """Factory function to create Flask app"""
    return BaklavaBotAPI(bot=bot, use_mock=use_mock).app
