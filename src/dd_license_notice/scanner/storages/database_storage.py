# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import json
import logging

from sqlalchemy import (
    Engine,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    select,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance
from dd_license_notice.model.scan_result import ScanResult
from dd_license_notice.scanner.scanner_criteria import ScannerCriteria
from dd_license_notice.scanner.storages.abstract_scan_results_storage import (
    ScanResultsStorage,
)
from dd_license_notice.storage.file_storage import IOFailure

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")


class Base(DeclarativeBase):
    pass


class ScanResultRecord(Base):
    """One stored scan result, unique per package, provenance and scanner."""

    __tablename__ = "scan_results"
    __table_args__ = (
        UniqueConstraint(
            "identifier",
            "provenance_hash",
            "scanner_name",
            "scanner_version",
            "scanner_configuration",
            name="uq_scan_results_key",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    identifier: Mapped[str] = mapped_column(String(512), index=True)
    provenance_hash: Mapped[str] = mapped_column(String(40))
    scanner_name: Mapped[str] = mapped_column(String(128))
    scanner_version: Mapped[str] = mapped_column(String(64))
    scanner_configuration: Mapped[str] = mapped_column(String(512))
    scan_result: Mapped[str] = mapped_column(Text)


class DatabaseStorage(ScanResultsStorage):
    """Store scan results as JSON documents in a relational database through SQLAlchemy."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        try:
            Base.metadata.create_all(engine)
        except SQLAlchemyError as e:
            raise IOFailure(f"Could not prepare the scan results table: {e}") from e
        self._session_factory = sessionmaker(bind=engine)

    @staticmethod
    def from_url(url: str) -> "DatabaseStorage":
        try:
            engine = create_engine(url, pool_pre_ping=True)
        except SQLAlchemyError as e:
            raise IOFailure(f"Invalid scan results database URL: {e}") from e
        return DatabaseStorage(engine)

    @property
    def name(self) -> str:
        return f"{type(self).__name__}({self.engine.url.get_backend_name()})"

    def read(
        self,
        package_id: PackageIdentifier,
        provenance: Provenance,
        criteria: ScannerCriteria | None = None,
    ) -> list[ScanResult]:
        statement = select(ScanResultRecord).where(
            ScanResultRecord.identifier == package_id.to_coordinates(),
            ScanResultRecord.provenance_hash == provenance.storage_hash(),
        )
        try:
            with self._session_factory() as session:
                documents = [record.scan_result for record in session.scalars(statement)]
        except SQLAlchemyError as e:
            raise IOFailure(
                f"Could not read scan results for {package_id.to_coordinates()}: {e}"
            ) from e

        results = []
        for document in documents:
            try:
                result = ScanResult.from_dict(json.loads(document))
            except (ValueError, KeyError, TypeError) as e:
                raise IOFailure(
                    f"Stored scan result for {package_id.to_coordinates()} is corrupt"
                ) from e
            if result.provenance != provenance:
                continue
            if criteria is None or criteria.matches(result.scanner):
                results.append(result)
        return results

    def add(self, package_id: PackageIdentifier, scan_result: ScanResult) -> None:
        if scan_result.package_id != package_id:
            raise ValueError(
                f"Scan result for {scan_result.package_id.to_coordinates()} cannot be stored for {package_id.to_coordinates()}."
            )
        record = ScanResultRecord(
            identifier=package_id.to_coordinates(),
            provenance_hash=scan_result.provenance.storage_hash(),
            scanner_name=scan_result.scanner.name,
            scanner_version=scan_result.scanner.version,
            scanner_configuration=scan_result.scanner.configuration,
            scan_result=json.dumps(scan_result.to_dict()),
        )
        try:
            with self._session_factory() as session:
                try:
                    session.add(record)
                    session.commit()
                except IntegrityError:
                    # a result of this scanner is already stored, replace it
                    session.rollback()
                    existing = session.scalars(
                        select(ScanResultRecord).where(
                            ScanResultRecord.identifier == record.identifier,
                            ScanResultRecord.provenance_hash == record.provenance_hash,
                            ScanResultRecord.scanner_name == record.scanner_name,
                            ScanResultRecord.scanner_version == record.scanner_version,
                            ScanResultRecord.scanner_configuration
                            == record.scanner_configuration,
                        )
                    ).one()
                    existing.scan_result = record.scan_result
                    session.commit()
        except SQLAlchemyError as e:
            raise IOFailure(
                f"Could not store scan result for {package_id.to_coordinates()}: {e}"
            ) from e
        logger.debug(
            f"Stored scan result of {scan_result.scanner.name} {scan_result.scanner.version} for {package_id.to_coordinates()} in {self.name}."
        )
