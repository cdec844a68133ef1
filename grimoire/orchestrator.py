"""Pipeline orchestration: materializes the versioned documentation tree."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .classifier import Classification, classify
from .config import ConfigError, GrimoireConfig, VersionConfig
from .errors import (
    FilesystemFailure,
    MetadataUnavailable,
    NameCollision,
    NamespaceUnavailableInVersion,
)
from .examples import ExampleProvider, build_example_provider
from .index import IndexBuilder
from .logging import get_logger, symbol_context
from .models import (
    NamespaceReport,
    RunReport,
    SymbolKind,
    SymbolOutcome,
    SymbolRecord,
    VersionReport,
)
from .naming import SanitizedNameRegistry
from .providers import MetadataProvider, build_provider
from .render import ContentRenderer
from .source import SourceExtractor
from .versions import ExampleResolver, VersionChain
from .writer import FragmentWriter, TreeLayout


class Orchestrator:
    """Coordinates classification, extraction, rendering and writing per version."""

    def __init__(
        self,
        config: GrimoireConfig,
        *,
        providers: Optional[Mapping[str, MetadataProvider]] = None,
        example_providers: Optional[Mapping[str, Optional[ExampleProvider]]] = None,
        writer: FragmentWriter | None = None,
        extractor: SourceExtractor | None = None,
        renderer: ContentRenderer | None = None,
        index_builder: IndexBuilder | None = None,
    ) -> None:
        self.config = config
        self.layout = TreeLayout(config.output_root)
        self.writer = writer or FragmentWriter()
        self.extractor = extractor or SourceExtractor(config.source_roots)
        self.renderer = renderer or ContentRenderer(
            highlight_language=config.highlight_language,
            edit_url=config.edit_url,
        )
        self.index_builder = index_builder or IndexBuilder()
        self.chain = VersionChain(
            (version.record for version in config.versions),
            self.layout.includes_root,
            exists=self.writer.exists,
        )
        self.examples = ExampleResolver(self.chain, self.renderer)
        self.logger = get_logger("orchestrator")
        self._provider_overrides = dict(providers) if providers is not None else None
        self._example_overrides = (
            dict(example_providers) if example_providers is not None else None
        )
        self._providers: Dict[str, MetadataProvider] = {}

    def run(self, versions: Optional[Sequence[str]] = None) -> RunReport:
        """Generate the tree for every configured version (or the named subset)."""
        selected = self._select_versions(versions)
        report = RunReport()
        for version in selected:
            report.versions.append(self.run_version(version))
        failed = report.failed_symbols
        self.logger.info(
            "Generated %d symbols across %d versions (%d failed)",
            report.symbol_count,
            len(report.versions),
            len(failed),
        )
        return report

    def run_version(self, version: VersionConfig) -> VersionReport:
        name = version.version
        self.logger.info("Processing version %s", name)
        self.writer.ensure_dir(self.layout.version_dir(name))
        self.writer.ensure_dir(self.layout.include_version_dir(name))

        provider = self._provider_for(version)
        example_provider = self._example_provider_for(version)

        report = VersionReport(version=name)
        for namespace in self.config.namespaces:
            if not version.includes(namespace):
                self.logger.info("Skipping %s: excluded from version %s", namespace, name)
                report.namespaces.append(
                    NamespaceReport(namespace=namespace, skipped="excluded by configuration")
                )
                continue
            try:
                ns_report = self.run_namespace(version, namespace, provider, example_provider)
            except NamespaceUnavailableInVersion as exc:
                self.logger.warning("Skipping %s for version %s: %s", namespace, name, exc)
                report.namespaces.append(NamespaceReport(namespace=namespace, skipped=str(exc)))
                continue
            report.namespaces.append(ns_report)

        commentary = self.layout.include_version_dir(name) / "index.md"
        self.writer.write_once(
            commentary,
            self.renderer.render_commentary(
                "release", "changelog", self.layout.relative(commentary)
            ),
        )
        self.writer.write(
            self.layout.version_dir(name) / "index.md",
            self.index_builder.render_version_page(
                name, [ns_report.namespace for ns_report in report.processed]
            ),
        )
        return report

    def run_namespace(
        self,
        version: VersionConfig,
        namespace: str,
        provider: MetadataProvider,
        example_provider: Optional[ExampleProvider] = None,
    ) -> NamespaceReport:
        name = version.version
        classification = classify(namespace, provider)
        page_dir = self.writer.ensure_dir(self.layout.namespace_dir(name, namespace))
        include_dir = self.writer.ensure_dir(self.layout.include_namespace_dir(name, namespace))

        report = NamespaceReport(namespace=namespace)
        for meta, exc in classification.rejected:
            self.logger.warning("Failed to write docs for %s: %s", exc.identity, exc.reason)
            label = meta.name if isinstance(meta.name, str) else "<unnamed>"
            report.outcomes.append(SymbolOutcome.failure(namespace, label, exc))

        tasks, collisions = self._claim_names(classification)
        for record, exc in collisions:
            self.logger.warning("Failed to write docs for %s: %s", record.identity, exc)
            report.outcomes.append(SymbolOutcome.failure(namespace, record.name, exc))

        if self.config.workers > 1 and len(tasks) > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
                futures = [
                    pool.submit(self.process_symbol, name, record, version, example_provider)
                    for record in tasks
                ]
                outcomes = [future.result() for future in futures]
        else:
            outcomes = [
                self.process_symbol(name, record, version, example_provider) for record in tasks
            ]
        report.outcomes.extend(outcomes)

        written = {outcome.name for outcome in outcomes if outcome.ok}
        succeeded = [record for record in tasks if record.name in written]

        commentary = include_dir / "index.md"
        self.writer.write_once(
            commentary,
            self.renderer.render_commentary(
                "namespace", "commentary", self.layout.relative(commentary)
            ),
        )
        self.writer.write(
            page_dir / "index.md",
            self.index_builder.render_namespace_page(
                name,
                namespace,
                macros=[record for record in succeeded if record.kind is SymbolKind.MACRO],
                values=[record for record in succeeded if record.kind is SymbolKind.VALUE],
                functions=[record for record in succeeded if record.kind is SymbolKind.FUNCTION],
            ),
        )
        self.logger.info(
            "Finished %s (%d symbols, %d failed)",
            namespace,
            len(report.succeeded),
            len(report.failed),
        )
        return report

    def process_symbol(
        self,
        version: str,
        record: SymbolRecord,
        version_config: Optional[VersionConfig] = None,
        example_provider: Optional[ExampleProvider] = None,
    ) -> SymbolOutcome:
        """Render and write one symbol; failures are returned, never raised."""
        with symbol_context(version, record.identity):
            try:
                fragments = self._write_symbol(version, record, version_config, example_provider)
            except (MetadataUnavailable, NameCollision, FilesystemFailure) as exc:
                self.logger.warning("Failed to write docs: %s", exc)
                return SymbolOutcome.failure(record.namespace, record.name, exc)
            except Exception as exc:
                self.logger.exception("Unexpected error while writing docs")
                return SymbolOutcome.failure(record.namespace, record.name, exc)
            self.logger.debug("Wrote %s", ", ".join(fragments))
            return SymbolOutcome.success(record, fragments)

    # ------------------------------------------------------------------
    # Internal helpers

    def _write_symbol(
        self,
        version: str,
        record: SymbolRecord,
        version_config: Optional[VersionConfig],
        example_provider: Optional[ExampleProvider],
    ) -> List[str]:
        sanitized = record.sanitized_name
        include_dir = self.writer.ensure_dir(
            self.layout.include_symbol_dir(version, record.namespace, sanitized)
        )
        page_dir = self.writer.ensure_dir(
            self.layout.symbol_dir(version, record.namespace, sanitized)
        )
        fragments: List[str] = []

        self.writer.write(include_dir / "docs.md", self.renderer.render_docs(record))
        fragments.append("docs")

        if record.kind.has_source:
            source = self.extractor.extract(record)
            src = self.renderer.render_src(record, source)
            if src is not None:
                self.writer.write(include_dir / "src.md", src)
                fragments.append("src")

        examples_path = include_dir / "examples.md"
        if not self.writer.exists(examples_path):
            content = self.examples.compose(
                version,
                record,
                self.layout.relative(examples_path),
                provider=example_provider,
                call_to_action=bool(version_config and version_config.call_to_action),
            )
            self.writer.write(examples_path, content)
            fragments.append("examples")

        self.writer.write(page_dir / "index.md", self.renderer.render_index(version, record))
        fragments.append("index")
        return fragments

    def _claim_names(
        self, classification: Classification
    ) -> Tuple[List[SymbolRecord], List[Tuple[SymbolRecord, NameCollision]]]:
        unique: Dict[str, SymbolRecord] = {}
        for record in classification.symbols:
            unique[record.name] = record
        registry = SanitizedNameRegistry()
        tasks: List[SymbolRecord] = []
        collisions: List[Tuple[SymbolRecord, NameCollision]] = []
        for name in sorted(unique):
            record = unique[name]
            try:
                registry.claim(name)
            except NameCollision as exc:
                collisions.append((record, exc))
                continue
            tasks.append(record)
        return tasks, collisions

    def _select_versions(self, names: Optional[Sequence[str]]) -> List[VersionConfig]:
        if not names:
            return list(self.config.versions)
        known = {version.version for version in self.config.versions}
        unknown = [name for name in names if name not in known]
        if unknown:
            raise ConfigError(f"Unknown versions requested: {', '.join(unknown)}")
        wanted = set(names)
        return [version for version in self.config.versions if version.version in wanted]

    def _provider_for(self, version: VersionConfig) -> MetadataProvider:
        if self._provider_overrides is not None:
            provider = self._provider_overrides.get(version.version)
            if provider is None:
                raise ConfigError(f"No metadata provider supplied for version {version.version}")
            return provider
        cached = self._providers.get(version.version)
        if cached is None:
            cached = build_provider(version.metadata, version=version.version)
            self._providers[version.version] = cached
        return cached

    def _example_provider_for(self, version: VersionConfig) -> Optional[ExampleProvider]:
        if self._example_overrides is not None:
            return self._example_overrides.get(version.version)
        return build_example_provider(version.examples)


__all__ = ["Orchestrator"]
