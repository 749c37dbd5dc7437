# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from dd_license_notice.model.scan_record import ScanRecord
from dd_license_notice.report_generator.writters.abstract_reporting_writter import (
    ReportingWritter,
)


class ReportGenerator:
    def __init__(self, reporting_writer: ReportingWritter):
        self.reporting_writer = reporting_writer

    def generate_report(self, scan_record: ScanRecord) -> str:
        return self.reporting_writer.write(scan_record)
