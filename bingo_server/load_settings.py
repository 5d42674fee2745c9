import os
from dotenv import load_dotenv

load_dotenv()

host = os.getenv("HOST", "0.0.0.0")
port = int(os.getenv("PORT", "8080"))
log_level = os.getenv("LOG_LEVEL", "INFO")
call_interval_sec = float(os.getenv("CALL_INTERVAL_SEC", "7"))
call_warmup_sec = float(os.getenv("CALL_WARMUP_SEC", "1"))
room_capacity = int(os.getenv("ROOM_CAPACITY", "90"))
min_withdrawal = int(os.getenv("MIN_WITHDRAWAL", "25"))
outbound_queue_size = int(os.getenv("OUTBOUND_QUEUE_SIZE", "100"))
index_html_path = os.getenv("INDEX_HTML_PATH", "./index.html")

if __name__ == "__main__":
    print(host, port, log_level, call_interval_sec, call_warmup_sec, room_capacity)
