"""
AI narrative analysis for anthropometry snapshots.

Sends a resolved snapshot to the analysis agent and parses its JSON answer.
When AI is disabled or the call fails, a deterministic offline analysis is
returned instead (flagged with ``is_fallback``).
"""

import json
import logging
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError
from upsonic import Task

from app.config import get_settings
from app.domain.protocols import Gender
from app.domain.snapshot import AnthroSnapshot
from app.services.ai_agent_service import get_anthro_analysis_agent

logger = logging.getLogger(__name__)

WHR_CUTOFF_MALE = 0.90
WHR_CUTOFF_FEMALE = 0.85


class MeasureDiagnosticCross(BaseModel):
    measure: str
    value: str
    meaning: str
    linked_diagnoses: List[str] = Field(default_factory=list)


class AnthroAnalysisResult(BaseModel):
    """Structured narrative analysis of a snapshot."""

    summary: str
    key_findings: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    recommended_actions: List[str] = Field(default_factory=list)
    measure_diagnostics_cross: List[MeasureDiagnosticCross] = Field(
        default_factory=list
    )
    is_fallback: bool = False


def _or_unknown(value) -> str:
    return str(value) if value else "?"


def build_prompt(snapshot: AnthroSnapshot) -> str:
    """Build the analysis prompt from a snapshot."""
    patient = snapshot.patient
    clinical = snapshot.clinical
    anthro = snapshot.anthro
    body_comp = anthro.body_comp

    diagnoses = ", ".join(clinical.active_diagnoses) or "Nenhum registrado"

    return (
        "Analise o snapshot antropométrico abaixo para fornecer uma interpretação clínica.\n\n"
        "REGRAS DE ANÁLISE:\n"
        "1. Vá além do IMC: avalie se a gordura está em níveis atléticos, saudáveis ou de risco para a idade/sexo.\n"
        "2. Use a Relação Cintura-Quadril (RCQ) e a circunferência de cintura para estratificar risco cardiometabólico.\n"
        "3. Estime se a massa magra está adequada ou se há sinais de sarcopenia/descondicionamento.\n"
        "4. Relacione as medidas com os diagnósticos ativos.\n"
        "5. NÃO invente dados. Se algo faltar (ex: dobras), indique a impossibilidade de análise específica.\n\n"
        "PACIENTE:\n"
        f"- Sexo: {patient.gender}, Idade: {patient.age}\n"
        f"- Objetivo: {clinical.objective or 'Não informado'}\n"
        f"- Diagnósticos Ativos: {diagnoses}\n\n"
        "SNAPSHOT DE DADOS:\n"
        f"- Data: {anthro.date}, Protocolo: {anthro.protocol}\n"
        f"- Peso: {anthro.weight_kg}kg, Altura: {anthro.height_m}m\n"
        f"- IMC: {body_comp.bmi}\n"
        f"- Gordura Corporal Est.: {_or_unknown(body_comp.body_fat_pct)}%\n"
        f"- Massa Magra Est.: {_or_unknown(body_comp.lean_mass_kg)}kg\n"
        f"- RCQ: {_or_unknown(body_comp.whr)}\n"
        f"- Circunferência Cintura: {_or_unknown(anthro.circumferences_cm.waist)} cm\n"
        f"- Circunferência Abdominal: {_or_unknown(anthro.circumferences_cm.abdomen)} cm\n\n"
        "RETORNE APENAS O JSON, com as chaves: summary (máx. 4 frases), key_findings (lista), "
        "risks (lista), recommended_actions (lista), measure_diagnostics_cross "
        "(lista de objetos com measure, value, meaning, linked_diagnoses)."
    )


def parse_analysis(text: str) -> AnthroAnalysisResult:
    """
    Parse the agent's answer into an AnthroAnalysisResult.

    Tolerates markdown code fences around the JSON.

    Raises:
        ValueError: If the answer is not valid analysis JSON
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.startswith("json"):
            cleaned = cleaned[len("json"):]
    try:
        payload = json.loads(cleaned)
        return AnthroAnalysisResult.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ValueError(f"Invalid analysis response: {e}")


def build_fallback_analysis(snapshot: AnthroSnapshot) -> AnthroAnalysisResult:
    """Deterministic analysis used when the AI is unavailable."""
    body_comp = snapshot.anthro.body_comp
    bmi = body_comp.bmi
    findings = []
    risks = []

    if bmi > 25:
        findings.append(f"IMC ({bmi}) indica sobrepeso/obesidade.")
    elif bmi < 18.5:
        findings.append(f"IMC ({bmi}) indica baixo peso.")
    else:
        findings.append(f"IMC ({bmi}) dentro da eutrofia.")

    if body_comp.whr > 0:
        cutoff = (
            WHR_CUTOFF_MALE
            if snapshot.patient.gender == Gender.MALE.value
            else WHR_CUTOFF_FEMALE
        )
        if body_comp.whr > cutoff:
            risks.append(
                "Relação Cintura-Quadril elevada (Risco Cardiometabólico Aumentado)."
            )

    if body_comp.body_fat_pct == 0:
        risks.append("Percentual de gordura não calculado (dobras ausentes).")

    return AnthroAnalysisResult(
        summary=f"Análise preliminar (Offline). Paciente com IMC {bmi}. {' '.join(findings)}",
        key_findings=findings,
        risks=risks,
        recommended_actions=[
            "Preencher todas as dobras cutâneas para análise precisa.",
            "Monitorar circunferência abdominal.",
        ],
        is_fallback=True,
    )


class AnthroAIAnalysisService:
    """Service for generating AI narrative analyses of anthropometry snapshots."""

    def analyze(
        self, snapshot: AnthroSnapshot, patient_key: Optional[str] = None
    ) -> AnthroAnalysisResult:
        """
        Analyze a snapshot.

        Args:
            snapshot: Fully resolved snapshot
            patient_key: Optional patient identifier for agent memory

        Returns:
            AI analysis, or the offline analysis if AI is disabled or fails
        """
        if not get_settings().ai_enabled:
            logger.info("[AI_ANTHRO] AI disabled, using offline analysis")
            return build_fallback_analysis(snapshot)

        try:
            agent = get_anthro_analysis_agent(patient_key)
            result = agent.do(Task(build_prompt(snapshot)))
            return parse_analysis(str(result))
        except Exception as e:
            # Any agent or parsing failure degrades to the offline analysis
            logger.warning(
                f"[AI_ANTHRO] AI analysis failed: {e}. Falling back to offline analysis",
                exc_info=True,
            )
            return build_fallback_analysis(snapshot)
