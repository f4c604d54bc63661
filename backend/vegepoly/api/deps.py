"""Shared FastAPI dependencies reading application state set up in main.py."""

from __future__ import annotations

from fastapi import Request

from vegepoly.config import AppSettings
from vegepoly.services.jobs import VegetationJobManager


def get_app_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_job_manager(request: Request) -> VegetationJobManager:
    return request.app.state.jobs
