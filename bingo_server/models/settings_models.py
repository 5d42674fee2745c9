from pydantic import BaseModel

from bingo_server import load_settings


class ServerSettings(BaseModel):
    host: str = load_settings.host
    port: int = load_settings.port
    log_level: str = load_settings.log_level
    call_interval_sec: float = load_settings.call_interval_sec
    call_warmup_sec: float = load_settings.call_warmup_sec
    room_capacity: int = load_settings.room_capacity
    min_withdrawal: int = load_settings.min_withdrawal
    outbound_queue_size: int = load_settings.outbound_queue_size
    index_html_path: str = load_settings.index_html_path
    random_seed: int | None = None
