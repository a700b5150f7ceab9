# auth/config.py
import streamlit as st
from streamlit.errors import StreamlitAPIException


def _section(name: str) -> dict:
    try:
        return dict(st.secrets[name])
    except (KeyError, FileNotFoundError, StreamlitAPIException):
        return {}


def get_supabase_config() -> tuple[str, str]:
    """
    Project URL and anon key from [supabase] in secrets.toml.
    """
    cfg = _section("supabase")
    url = cfg.get("url")
    anon_key = cfg.get("anon_key")

    if not url or not anon_key:
        raise RuntimeError("Missing secrets supabase.url / supabase.anon_key")

    return url.rstrip("/"), anon_key


def get_postgres_url() -> str:
    url = _section("postgres").get("url")
    if not url:
        raise RuntimeError("Missing secret postgres.url")
    return url


def get_app_config() -> dict:
    cfg = _section("app")
    return {
        "site_url": (cfg.get("site_url") or "").rstrip("/"),
        "dev_tools": bool(cfg.get("dev_tools", False)),
        "log_level": str(cfg.get("log_level", "INFO")).upper(),
    }
