"""
AI Agent Manager Service.

Builds the upsonic agent used for anthropometric narrative analysis, including
its memory storage.
"""

from pathlib import Path
from typing import Optional

from upsonic import Agent
from upsonic.storage import Memory
from upsonic.storage.providers.sqlite import SqliteStorage

from app.config import get_settings


def get_storage_path() -> str:
    """Get SQLite storage path from settings, creating its directory."""
    storage_path = get_settings().ai_memory_db_path

    # Ensure directory exists
    Path(storage_path).parent.mkdir(parents=True, exist_ok=True)

    return storage_path


# Initialize storage singleton
_storage: Optional[SqliteStorage] = None


def get_storage() -> SqliteStorage:
    """Get or create SQLite storage singleton."""
    global _storage
    if _storage is None:
        _storage = SqliteStorage(
            db_file=get_storage_path(),
            sessions_table_name="sessions",
            profiles_table_name="profiles",
        )
    return _storage


def get_anthro_analysis_agent(patient_key: Optional[str] = None) -> Agent:
    """
    Get or create the Anthropometry Analysis Agent.

    Args:
        patient_key: Stable patient identifier; enables per-patient memory
            when given

    Returns:
        Configured Agent instance
    """
    settings = get_settings()

    memory = None
    if patient_key:
        memory = Memory(
            storage=get_storage(),
            session_id=f"anthro_{patient_key}",
            user_id=str(patient_key),
            full_session_memory=True,
            summary_memory=True,
            model=settings.ai_memory_model,
        )

    agent = Agent(
        name="AnthropometryAnalystAgent",
        role="Especialista em fisiologia do exercício e nutrição clínica (cineantropometria)",
        goal="Interpretar o snapshot antropométrico do paciente e estratificar riscos",
        instructions=(
            "Você analisa snapshots antropométricos para nutricionistas. "
            "Avalie composição corporal, risco metabólico (RCQ e cintura), massa magra "
            "e a relação das medidas com os diagnósticos ativos. "
            "Nunca invente dados ausentes. Responda apenas com o JSON solicitado."
        ),
        model=settings.ai_model,
        memory=memory,
    )

    return agent
