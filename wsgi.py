# wsgi.py
# -*- coding: utf-8 -*-
import os

from proplayhub_app import create_app, socketio

app = create_app()

if __name__ == "__main__":
    socketio.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")), debug=app.config.get("FLASK_DEBUG") == "1")
