"""
SurgiEval — Клієнт генеративного AI

Два зовнішні виклики:
- generate_scenario: тема + режим -> сценарій станції
- generate_feedback: сценарій + відповіді + нотатки -> FeedbackRecord

Будь-яка помилка (транспорт, порожня відповідь, невалідний JSON,
порушення схеми) зводиться до GenerationError.

Приклад:
    client = GeminiClient(GenerationConfig.from_env())
    scenario = client.generate_scenario("Toracostomía", ExamMode.PROCEDURE)
"""

from abc import ABC, abstractmethod
import json
import logging
from typing import Any, Dict, Mapping, Optional

import requests
from pydantic import ValidationError

from surgi_eval.config import GenerationConfig
from surgi_eval.exceptions import GenerationError
from surgi_eval.schemas import (
    ExamMode, FeedbackRecord, PerformanceStatus, ScenarioBase, parse_scenario
)
from .prompts import (
    SCENARIO_SCHEMA, FEEDBACK_SCHEMA,
    build_scenario_prompt, build_feedback_prompt,
)

logger = logging.getLogger(__name__)


class GenerationClient(ABC):
    """Інтерфейс зовнішнього генератора"""

    @abstractmethod
    def generate_scenario(
        self,
        topic: str,
        mode: ExamMode,
        include_simulated_patient: bool = False,
    ) -> ScenarioBase:
        """Сценарій станції для теми; GenerationError при збої"""

    @abstractmethod
    def generate_feedback(
        self,
        scenario: ScenarioBase,
        responses: Mapping[str, PerformanceStatus],
        notes: str,
        computed_score: float,
    ) -> FeedbackRecord:
        """Зворотний зв'язок за чек-листом; GenerationError при збої"""


class GeminiClient(GenerationClient):
    """
    Gemini generateContent через REST (requests).

    Відповідь запитується як application/json зі схемою відповіді.
    """

    def __init__(self, config: Optional[GenerationConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or GenerationConfig.from_env()
        self.http = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.config.api_base.rstrip('/')}/models/{self.config.model}:generateContent"

    def _generate_json(self, prompt: str, schema: Dict[str, Any], temperature: float) -> Dict[str, Any]:
        """Один запит generateContent -> розпарсений JSON об'єкт"""
        api_key = self.config.resolve_api_key()
        if not api_key:
            raise GenerationError(f"API key not configured (set {self.config.api_key_env})")

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema,
                "temperature": temperature,
            },
        }

        try:
            r = self.http.post(
                self.endpoint,
                headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
                json=payload,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise GenerationError(f"Transport error: {e}") from e

        if r.status_code != 200:
            raise GenerationError(f"LLM API error {r.status_code}: {r.text[:500]}")

        try:
            data = r.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationError("No data returned from AI") from e

        if not text or not text.strip():
            raise GenerationError("No data returned from AI")

        try:
            result = json.loads(text)
        except json.JSONDecodeError as e:
            raise GenerationError(f"Invalid JSON from AI: {e}") from e

        if not isinstance(result, dict):
            raise GenerationError("AI response is not a JSON object")

        return result

    def generate_scenario(
        self,
        topic: str,
        mode: ExamMode,
        include_simulated_patient: bool = False,
    ) -> ScenarioBase:
        mode = ExamMode(mode)
        prompt = build_scenario_prompt(topic, mode.is_procedure, include_simulated_patient)

        logger.info("Generating %s scenario: %s", mode.value, topic)
        data = self._generate_json(prompt, SCENARIO_SCHEMA, self.config.scenario_temperature)

        try:
            scenario = parse_scenario(data, mode)
        except ValidationError as e:
            raise GenerationError(f"Scenario does not match schema: {e.error_count()} errors") from e

        return scenario.with_topic(topic)

    def generate_feedback(
        self,
        scenario: ScenarioBase,
        responses: Mapping[str, PerformanceStatus],
        notes: str,
        computed_score: float,
    ) -> FeedbackRecord:
        prompt = build_feedback_prompt(scenario, responses, notes, computed_score)

        logger.info("Generating feedback for: %s", scenario.title)
        data = self._generate_json(prompt, FEEDBACK_SCHEMA, self.config.feedback_temperature)

        try:
            return FeedbackRecord.model_validate(data)
        except ValidationError as e:
            raise GenerationError(f"Feedback does not match schema: {e.error_count()} errors") from e
