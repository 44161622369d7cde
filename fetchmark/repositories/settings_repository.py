"""Search settings persistence."""

import logging

from sqlmodel import Session, select

from fetchmark.models.settings import SearchSettings
from fetchmark.schemas.settings import SearchConfig, SearchSettingsUpdate

logger = logging.getLogger(__name__)


class SettingsRepository:
    """Reads and updates the single search settings row."""

    def __init__(self, session: Session):
        self.session = session

    def get_row(self) -> SearchSettings:
        """
        Get the stored settings row.

        Returns:
            SearchSettings instance (creates default if none exists)
        """
        row = self.session.exec(select(SearchSettings)).first()
        if not row:
            row = SearchSettings()
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
            logger.info("Created default search settings")
        return row

    def get_settings(self) -> SearchConfig:
        """Return an immutable snapshot of the current search configuration."""
        return SearchConfig.model_validate(self.get_row())

    def update_settings(self, update_data: SearchSettingsUpdate) -> SearchSettings:
        """
        Apply a partial update to the stored settings.

        Args:
            update_data: Fields to change; None leaves a field untouched

        Returns:
            Updated SearchSettings row
        """
        row = self.get_row()

        if update_data.search_provider is not None:
            row.search_provider = update_data.search_provider

        if update_data.groq_api_key is not None:
            row.groq_api_key = update_data.groq_api_key.strip() or None

        if update_data.hf_api_key is not None:
            row.hf_api_key = update_data.hf_api_key.strip() or None

        if update_data.ollama_model is not None:
            row.ollama_model = update_data.ollama_model.strip()

        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        logger.info(f"Search settings updated (provider={row.search_provider})")
        return row
