from __future__ import annotations

from dependency_injector import containers, providers

from .config import AppConfig
from ..core.domain.models import OutputFormat
from ..core.services import (
    CommitResolver,
    ConversionOrchestrator,
    OutcomeClassifier,
    RecordEmitter,
    ReferenceMiner,
    VendorProductDenyList,
    VendorProductRepoCache,
)
from ..core.usecases.convert import ConvertUseCase
from ..core.usecases.outcomes import OutcomesUseCase
from ..infra.cpe_repo_map import CpeRepoMapLoader
from ..infra.git_repo import GitRepoMetadata
from ..infra.logging import ConversionLogger
from ..infra.nvd_feed import NvdFeed
from ..infra.outcome_report import OutcomeReport
from ..infra.record_writer import RecordWriter


class Container(containers.DeclarativeContainer):
    """DI container with Pydantic BaseSettings support."""

    config = providers.Configuration(pydantic_settings=[AppConfig()])

    # Adapters
    feed = providers.Singleton(NvdFeed)

    repo_map_loader = providers.Singleton(CpeRepoMapLoader)

    repo_meta = providers.Singleton(
        GitRepoMetadata,
        timeout=config.git.ls_remote_timeout,
    )

    record_writer = providers.Singleton(
        RecordWriter,
        out_dir=config.output.out_dir,
    )

    outcome_report = providers.Singleton(
        OutcomeReport,
        out_dir=config.output.out_dir,
    )

    # Logger (Resource: manages lifecycle with init/shutdown)
    logger = providers.Resource(
        ConversionLogger,
        run_name=config.runtime.run_name,
        logs_dir=config.directories.logs_dir,
        logger_name=config.logging.logger_name,
        console_output=config.logging.console_output,
        level=config.logging.level,
    )

    # Domain services
    cache = providers.Singleton(VendorProductRepoCache)

    classifier = providers.Singleton(OutcomeClassifier)

    vp_denylist = providers.Singleton(
        VendorProductDenyList.from_strings,
        config.filters.vendor_product_denylist,
    )

    miner = providers.Factory(
        ReferenceMiner,
        repo_meta=repo_meta,
        logger=logger,
    )

    resolver = providers.Factory(
        CommitResolver,
        repo_meta=repo_meta,
        logger=logger,
    )

    emitter = providers.Factory(
        RecordEmitter,
        writer=record_writer,
        classifier=classifier,
        logger=logger,
        out_format=providers.Callable(OutputFormat, config.output.format),
    )

    orchestrator = providers.Factory(
        ConversionOrchestrator,
        cache=cache,
        miner=miner,
        resolver=resolver,
        emitter=emitter,
        classifier=classifier,
        logger=logger,
        vp_denylist=vp_denylist,
        ref_tag_denylist=config.filters.ref_tag_denylist,
    )

    # Use cases
    convert_uc = providers.Factory(
        ConvertUseCase,
        feed=feed,
        repo_map_loader=repo_map_loader,
        cache=cache,
        orchestrator=orchestrator,
        report=outcome_report,
        logger=logger,
    )

    outcomes_uc = providers.Factory(
        OutcomesUseCase,
        report=outcome_report,
    )
