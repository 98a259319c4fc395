import os
from dataclasses import dataclass

from sqlalchemy.orm import sessionmaker

from core.config_loader import AppConfig, LlmConfig
from core.llm.openai_service import OpenAIService
from core.swipe import FeedAssembler, PreferenceLedgerService, PreferenceSummarizer
from database.database import create_session_factory


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Single source of truth for service instantiation, shared by the CLI and
    the web layer. Services open their own units of work from
    ``session_factory``.
    """
    config: AppConfig
    session_factory: sessionmaker
    ai_service: OpenAIService
    ledger_service: PreferenceLedgerService
    feed_assembler: FeedAssembler
    summarizer: PreferenceSummarizer

    @classmethod
    def build(cls, config: AppConfig, session_factory: sessionmaker = None) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            session_factory: Optional pre-built sessionmaker (tests); built from
                ``config.database.url`` otherwise

        Returns:
            Fully wired AppContext instance
        """
        if session_factory is None:
            session_factory = create_session_factory(config.database.url, pool_pre_ping=True)

        ai_service = cls._build_ai_service(config.llm or LlmConfig())

        ledger_service = PreferenceLedgerService(session_factory)
        feed_assembler = FeedAssembler(
            session_factory,
            ledger_service,
            parallel_reads=config.feed.parallel_reads
        )
        summarizer = PreferenceSummarizer(
            session_factory,
            ledger_service,
            ai_service,
            sample_size=config.summarizer.sample_size,
            max_words=config.summarizer.max_words
        )

        return cls(
            config=config,
            session_factory=session_factory,
            ai_service=ai_service,
            ledger_service=ledger_service,
            feed_assembler=feed_assembler,
            summarizer=summarizer
        )

    @staticmethod
    def _build_ai_service(llm_config: LlmConfig) -> OpenAIService:
        """Build OpenAI service from LLM configuration."""
        model_config = {
            'generation_model': llm_config.generation_model,
            'temperature': llm_config.temperature,
            'max_tokens': llm_config.max_tokens,
        }

        api_key = llm_config.api_key or os.environ.get("OPENAI_API_KEY")
        if not api_key and llm_config.base_url:
            # Local OpenAI-compatible servers ignore the key but the client requires one
            api_key = "not-needed"

        return OpenAIService(
            base_url=llm_config.base_url,
            api_key=api_key,
            model_config=model_config,
            timeout=llm_config.request_timeout_seconds
        )
