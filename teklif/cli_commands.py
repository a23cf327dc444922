"""
Flask CLI commands for the proposal archive.

Commands:
- flask export-funnel: Write the funnel CSV of the archive to a file
"""

import click
from datetime import date
from pathlib import Path
from flask import current_app

from teklif.exceptions import BusinessLogicError
from teklif.models import FilterCriteria
from teklif.services.export_service import export_csv, export_filename
from teklif.services.filter_service import filter_proposals


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('export-funnel')
    @click.option('--output', '-o', type=click.Path(dir_okay=False), default=None,
                  help='Target file (default: Teklif_Funnel_<DD-MM-YYYY>.csv)')
    @click.option('--q', 'query', default='', help='Search proposal number or product name')
    @click.option('--company', default='', help='Company id')
    @click.option('--preparer', default='', help='Preparer name')
    @click.option('--status', default='', help='Proposal status (e.g. Bekliyor, Won)')
    def export_funnel(output, query, company, preparer, status):
        """Export the (filtered) proposal archive as funnel CSV."""
        archive = current_app.extensions['proposal_archive']

        try:
            criteria = FilterCriteria.from_args({
                'q': query, 'company': company, 'preparer': preparer, 'status': status
            })
        except BusinessLogicError as e:
            raise click.BadParameter(e.message, param_hint='--status')

        filtered = filter_proposals(archive.proposals, criteria)
        target = Path(output or export_filename(date.today()))
        target.write_bytes(export_csv(filtered, archive.companies))

        click.echo(click.style(f'✅ {len(filtered)} teklif dışa aktarıldı: {target}', fg='green'))
