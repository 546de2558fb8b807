"""
Script to generate reports based on a YAML configuration.

Example config:
    user_id: demo-user
    report_type: time        # invoices | time | tasks
    format: html             # csv | html | xlsx
    start_date: 2026-01-01
    end_date: 2026-01-31
    client_id: null
    output_path: reports/january.html
"""

import sys
import yaml
import asyncio
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from clientdesk.infra.config import get_settings
from clientdesk.infra.db import DatabaseEngine, init_db
from clientdesk.services import ReportFilter, ReportService
from clientdesk.services.export_service import export_filename, save_export


class ReportJob(BaseModel):
    """What to export, read from YAML"""
    user_id: str = Field(..., min_length=1)
    report_type: str = Field(default="invoices", pattern="^(invoices|time|tasks)$")
    format: str = Field(default="csv", pattern="^(csv|html|xlsx)$")
    filter: ReportFilter
    output_path: Optional[Path] = None


async def main():
    if len(sys.argv) < 2:
        print("Usage: python generate_report.py <config_file.yaml>")
        sys.exit(1)

    config_path = Path(sys.argv[1])
    if not config_path.exists():
        print(f"Error: Config file '{config_path}' not found.")
        sys.exit(1)

    print(f"Loading configuration from {config_path}...")
    with open(config_path, 'r') as f:
        config_data = yaml.safe_load(f) or {}

    try:
        job = ReportJob(
            user_id=config_data.get("user_id", ""),
            report_type=config_data.get("report_type", "invoices"),
            format=config_data.get("format", "csv"),
            filter={key: config_data.get(key) for key in ("start_date", "end_date", "client_id", "task_id")},
            output_path=config_data.get("output_path"),
        )
    except ValidationError as e:
        print(f"Error parsing configuration: {e}")
        sys.exit(1)

    settings = get_settings()
    await init_db(settings.get_db_url())

    print(f"Generating {job.report_type} report for {job.filter.start_date} - {job.filter.end_date}")
    service = ReportService(job.user_id, preferences=settings.preferences)
    data = await service.fetch(job.filter)

    output_file = job.output_path or config_path.parent / export_filename(f"{job.report_type}_report", job.format)
    if job.format == "csv":
        save_export(service.export_csv(job.report_type, data), output_file.name, output_file.parent)
    elif job.format == "html":
        service.export_html(job.report_type, data, job.filter, job.user_id, output_file=output_file)
    else:
        service.export_xlsx(job.report_type, data, job.filter, output_file)

    await DatabaseEngine.dispose_instance()
    print(f"Report successfully saved to: {output_file.absolute()}")


if __name__ == "__main__":
    asyncio.run(main())
