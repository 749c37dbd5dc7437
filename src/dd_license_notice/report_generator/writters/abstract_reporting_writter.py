# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from abc import ABC, abstractmethod

from dd_license_notice.model.scan_record import ScanRecord


class ReportingWritter(ABC):
    @abstractmethod
    def write(self, scan_record: ScanRecord) -> str:
        raise NotImplementedError
