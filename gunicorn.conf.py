import os

bind = f"""[::]:{os.getenv("GUNICORN_PORT", "8001")}"""
workers = os.getenv("GUNICORN_NUM_WORKERS", "2")
worker_class = "uvicorn.workers.UvicornWorker"
timeout = os.getenv("GUNICORN_TIMEOUT", "60")
# Keep-alive comments on the email stream arrive every 15 seconds
graceful_timeout = os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "20")
worker_tmp_dir = os.getenv("GUNICORN_WORKER_DIR")
loglevel = os.getenv("GUNICORN_LOGLEVEL", "INFO").lower()
