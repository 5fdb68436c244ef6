"""Record store persisted to a single JSON file."""

import json
from pathlib import Path

from brandquiz.core.logging import get_logger
from brandquiz.schemas.records import (
    AnswerOptionRecord,
    QuestionRecord,
    QuizRecord,
    ResponseAnswerRecord,
    ResponseRecord,
    ResultTypeRecord,
    ScoringMappingRecord,
)
from brandquiz.storage.memory import InMemoryQuizStore

logger = get_logger("brandquiz.storage")

RECORD_TYPES = {
    model.__name__: model
    for model in (
        QuizRecord,
        QuestionRecord,
        AnswerOptionRecord,
        ResultTypeRecord,
        ScoringMappingRecord,
        ResponseRecord,
        ResponseAnswerRecord,
    )
}


class JsonFileQuizStore(InMemoryQuizStore):
    """InMemoryQuizStore that rewrites a JSON file after every committed write."""

    def __init__(self, path: Path):
        """
        Open (or create) a store file.

        Args:
            path: JSON file location; parent directories are created
        """
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.path.exists():
            self._load()

    def _load(self) -> None:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        for table_name, rows in data.items():
            model = RECORD_TYPES.get(table_name)
            if model is None:
                logger.warning(
                    f"Skipping unknown table '{table_name}' in {self.path}",
                    context={"path": str(self.path)},
                )
                continue
            self._tables[table_name] = {
                row["id"]: model.model_validate(row) for row in rows
            }

    def _commit(self) -> None:
        data = {
            table_name: [record.model_dump(mode="json") for record in table.values()]
            for table_name, table in self._tables.items()
        }
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)
