import os
import random

from main import create_app, db

app = create_app()
# Prevent DB connections and random numbers being shared
ppid = os.getpid()


@app.before_request
def fix_shared_state():
    if os.getpid() != ppid:
        db.engine.dispose()
        random.seed()
