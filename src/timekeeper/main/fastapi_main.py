import asyncio
import argparse
from dataclasses import dataclass
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from timekeeper.core.surface import TimeSurface
from timekeeper.utils.config import Settings
from timekeeper.utils.logging_handler import setup_logger
from timekeeper.tools.time_tools.clock import THEMES, Clock
from timekeeper.tools.time_tools.sounds import ALARM_SOUNDS, resolve_sound
from timekeeper.tools.time_tools.timer import PRESETS
from timekeeper.utils.time_conversions import (
    DEFAULT_HOUR12,
    DEFAULT_MINUTE,
    clamp_hour12_input,
    clamp_minute_input,
    step_hour12,
    step_minute,
)
from timekeeper.adapters.clock_adapters.system_clock import SystemWallClock
from timekeeper.adapters.audio_adapters.silent_adapter import SilentAudioPlayer
from timekeeper.adapters.memory_adapters.sqlite_kv_adapter import SqliteKeyValueStore

logger = setup_logger(__name__)


@dataclass
class Args:
    host: str = "127.0.0.1"
    port: int = 8000
    db_path: Optional[str] = None
    no_audio: bool = False


# --- Request bodies ---

class KeyPress(BaseModel):
    key: str


class PresetChoice(BaseModel):
    value: str


class SoundChoice(BaseModel):
    sound: str


class NewAlarm(BaseModel):
    hour: int
    minute: int
    label: str = "Alarm"
    sound: Optional[str] = None


class NewAlarm12h(BaseModel):
    hour: int
    minute: int
    meridiem: str = "AM"
    label: str = "Alarm"
    sound: Optional[str] = None


class AlarmFieldStep(BaseModel):
    hour: int = DEFAULT_HOUR12
    minute: int = DEFAULT_MINUTE
    field: str = "hour"
    amount: int = 1


class NewCity(BaseModel):
    timezone: str


class CityName(BaseModel):
    name: str


class CityMove(BaseModel):
    from_index: int
    to_index: int


class WorldClockSettingsUpdate(BaseModel):
    is_24_hour: Optional[bool] = None
    show_offset: Optional[bool] = None
    show_date: Optional[bool] = None


class ThemeChoice(BaseModel):
    theme: str


class Prompt(BaseModel):
    prompt: str


def build_surface(args: Args, settings: Optional[Settings] = None) -> TimeSurface:
    """Wires the time surface to the real clock, the SQLite store, audio and Gemini."""
    settings = settings or Settings.from_env()
    store = SqliteKeyValueStore(args.db_path or settings.db_path)

    if args.no_audio:
        audio_factory = SilentAudioPlayer
    else:
        # Imported here so a machine without PortAudio can still run with --no-audio.
        from timekeeper.adapters.audio_adapters.sd_adapter import SoundDevicePlayer
        audio_factory = SoundDevicePlayer

    assistant = None
    if settings.google_api_key:
        from timekeeper.adapters.llm_adapters.gemini_adapter import GeminiAssistant
        assistant = GeminiAssistant(model=settings.gemini_model, api_key=settings.google_api_key)
    else:
        logger.warning("GOOGLE_API_KEY is not set; the assistant is disabled.")

    return TimeSurface(SystemWallClock(), store, audio_factory, settings=settings, assistant=assistant)


# --- APP FACTORY ---
def create_app(args: Args, surface: Optional[TimeSurface] = None) -> FastAPI:
    surface = surface or build_surface(args)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        surface.start(asyncio.get_running_loop())
        yield
        # Cleanup
        surface.stop()

    app = FastAPI(lifespan=lifespan)
    app.state.surface = surface

    # --- Stopwatch ---

    @app.get("/stopwatch")
    async def stopwatch_status():
        return surface.stopwatch.get_status()

    @app.post("/stopwatch/{action}")
    async def stopwatch_action(action: str):
        stopwatch = surface.stopwatch
        actions = {
            "start": stopwatch.start,
            "stop": stopwatch.stop,
            "toggle": stopwatch.toggle,
            "lap": stopwatch.lap,
            "lap-or-reset": stopwatch.lap_or_reset,
            "reset": stopwatch.reset,
        }
        if action not in actions:
            raise HTTPException(status_code=404, detail=f"Unknown stopwatch action: {action}")
        if action == "reset":
            stopwatch.reset()
        else:
            actions[action](surface.clock.now())
        return stopwatch.get_status()

    # --- Timer ---

    @app.get("/timer")
    async def timer_status():
        return surface.timer.get_status()

    @app.get("/timer/presets")
    async def timer_presets():
        return PRESETS

    @app.post("/timer/toggle")
    async def timer_toggle():
        return surface.timer_toggle()

    @app.post("/timer/key")
    async def timer_key(body: KeyPress):
        return surface.timer_key(body.key)

    @app.post("/timer/preset")
    async def timer_preset(body: PresetChoice):
        return surface.timer_preset(body.value)

    @app.post("/timer/dismiss")
    async def timer_dismiss():
        return surface.timer_dismiss()

    @app.post("/timer/reset")
    async def timer_reset():
        return surface.timer_reset()

    @app.post("/timer/sound")
    async def timer_sound(body: SoundChoice):
        surface.timer.set_sound(resolve_sound(body.sound))
        return surface.timer.get_status()

    # --- Alarms ---

    @app.get("/alarms")
    async def alarm_list():
        return surface.alarms.get_status()

    @app.get("/alarms/sounds")
    async def alarm_sounds():
        return [sound["name"] for sound in ALARM_SOUNDS]

    @app.post("/alarms")
    async def alarm_add(body: NewAlarm):
        entry = surface.alarms.add(
            body.hour, body.minute, label=body.label,
            sound_ref=resolve_sound(body.sound) if body.sound else None,
        )
        return entry.to_dict()

    @app.post("/alarms/12h")
    async def alarm_add_12h(body: NewAlarm12h):
        entry = surface.alarms.add_12h(
            body.hour, body.minute, body.meridiem, label=body.label,
            sound_ref=resolve_sound(body.sound) if body.sound else None,
        )
        return entry.to_dict()

    @app.post("/alarms/12h/step")
    async def alarm_step_12h(body: AlarmFieldStep):
        # Up/down buttons of the 12-hour entry form; the untouched field is only clamped.
        if body.field not in ("hour", "minute"):
            raise HTTPException(status_code=400, detail=f"Unknown field: {body.field}")
        hour, minute = clamp_hour12_input(body.hour), clamp_minute_input(body.minute)
        if body.field == "hour":
            hour = step_hour12(hour, body.amount)
        else:
            minute = step_minute(minute, body.amount)
        return {"hour": hour, "minute": minute}

    @app.post("/alarms/dismiss")
    async def alarm_dismiss():
        return surface.alarm_dismiss()

    @app.post("/alarms/{alarm_id}/toggle")
    async def alarm_toggle(alarm_id: int):
        entry = surface.alarms.toggle_enabled(alarm_id)
        if entry is None:
            raise HTTPException(status_code=404, detail=f"Unknown alarm: {alarm_id}")
        return entry.to_dict()

    @app.delete("/alarms/{alarm_id}")
    async def alarm_delete(alarm_id: int):
        if not surface.alarms.delete(alarm_id):
            raise HTTPException(status_code=404, detail=f"Unknown alarm: {alarm_id}")
        return surface.alarms.get_status()

    # --- World clock ---

    @app.get("/world-clock")
    async def world_clock_status():
        return surface.world_clock.get_status()

    @app.get("/world-clock/timezones")
    async def world_clock_timezones(q: str = ""):
        return Clock.search_timezones(q)

    @app.post("/world-clock/cities")
    async def world_clock_add(body: NewCity):
        if surface.world_clock.add_city(body.timezone) is None:
            raise HTTPException(status_code=400, detail=f"Cannot add timezone: {body.timezone}")
        return surface.world_clock.get_status()

    @app.delete("/world-clock/cities/{city_id:path}")
    async def world_clock_remove(city_id: str):
        if not surface.world_clock.remove_city(city_id):
            raise HTTPException(status_code=400, detail=f"Cannot remove city: {city_id}")
        return surface.world_clock.get_status()

    @app.post("/world-clock/rename/{city_id:path}")
    async def world_clock_rename(city_id: str, body: CityName):
        if surface.world_clock.rename_city(city_id, body.name) is None:
            raise HTTPException(status_code=400, detail=f"Cannot rename city: {city_id}")
        return surface.world_clock.get_status()

    @app.post("/world-clock/move")
    async def world_clock_move(body: CityMove):
        if not surface.world_clock.move_city(body.from_index, body.to_index):
            raise HTTPException(status_code=400, detail="Cannot move city")
        return surface.world_clock.get_status()

    @app.post("/world-clock/settings")
    async def world_clock_settings(body: WorldClockSettingsUpdate):
        changes = {k: v for k, v in body.model_dump().items() if v is not None}
        surface.world_clock.update_settings(**changes)
        return surface.world_clock.get_status()

    # --- Digital clock ---

    @app.get("/clock")
    async def clock_status():
        return surface.digital_clock.get_status()

    @app.get("/clock/themes")
    async def clock_themes():
        return THEMES

    @app.post("/clock/format")
    async def clock_format():
        surface.digital_clock.toggle_format()
        return surface.digital_clock.get_status()

    @app.post("/clock/theme")
    async def clock_theme(body: ThemeChoice):
        if body.theme not in THEMES:
            raise HTTPException(status_code=400, detail=f"Unknown theme: {body.theme}")
        surface.digital_clock.set_theme(body.theme)
        return surface.digital_clock.get_status()

    # --- Assistant ---

    @app.post("/assistant")
    async def assistant(body: Prompt):
        # The model call blocks; keep it off the loop so ticks continue.
        reply = await asyncio.to_thread(surface.ask, body.prompt)
        return {"reply": reply}

    return app


def run_app(args: Args) -> None:
    app = create_app(args)
    try:
        uvicorn.run(app, host=args.host, port=args.port)
    except Exception as e:
        logger.error(f"error in run_app: {e}")


def main() -> None:
    default_args = Args()
    parser = argparse.ArgumentParser(description="Stopwatch, timer, alarms and world clock over HTTP.")
    parser.add_argument("--host", type=str, default=default_args.host)
    parser.add_argument("--port", type=int, default=default_args.port)
    parser.add_argument("--db-path", type=str, default=default_args.db_path)
    parser.add_argument("--no-audio", action="store_true")
    parsed_args = parser.parse_args()
    run_app(Args(**vars(parsed_args)))


if __name__ == "__main__":
    logger.info("=" * 50)
    main()
