"""Command line entry point for the file_contexts generator"""
import sys
from typing import Optional

import click

from file_contexts_gen.config import ConfigurationError, GeneratorConfig, Mode
from file_contexts_gen.pipeline.context_processor import process_file_contexts
from file_contexts_gen.utils.config_loader import ConfigLoader
from file_contexts_gen.utils.logger import get_logger, set_console_level

logger = get_logger(__name__)

def load_config_defaults(ctx: click.Context, param: click.Parameter, value):
    """Eager callback: YAML values become option defaults"""
    try:
        defaults = ConfigLoader.load_defaults(value)
    except ConfigurationError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)

    mode = defaults.pop('mode', None)
    if mode is not None:
        try:
            ctx.meta['config_mode'] = Mode(str(mode).lower())
        except ValueError:
            raise click.BadParameter(f"Unknown mode in config file: {mode}", ctx=ctx, param=param)

    ctx.default_map = {**(ctx.default_map or {}), **defaults}
    return value

def resolve_mode(all_entries: bool, bin_only: bool, fallback: Optional[Mode] = None) -> Mode:
    """Command line flags win over a mode from the config file"""
    if all_entries and bin_only:
        raise ConfigurationError("Options -a/--all and -b/--bin are mutually exclusive")
    if bin_only:
        return Mode.BIN
    if all_entries:
        return Mode.ALL
    if fallback is not None:
        return fallback
    raise ConfigurationError("Must specify either -a or -b mode")

@click.command(help="Automatically generate missing file_contexts based on file/folder location")
@click.option('--config', type=click.Path(dir_okay=False), is_eager=True, expose_value=False,
              callback=load_config_defaults, help='YAML file with option defaults')
@click.option('--all', '-a', 'all_entries', is_flag=True, help='Autogenerate all missing contexts')
@click.option('--bin', '-b', 'bin_only', is_flag=True, help='Autogenerate only /bin/ missing contexts')
@click.option('--fstype', '-f', required=True, help='Filesystem type: ext4, erofs, f2fs')
@click.option('--partition', '-p', required=True, type=click.Path(), help='Path to extracted partition folder')
@click.option('--contexts', '-c', required=True, type=click.Path(dir_okay=False),
              help='Path to partition_file_contexts file')
@click.option('--threads', '-t', type=int, default=None, show_default="FCGEN_THREADS or 4",
              help='Number of parallel threads to use')
@click.option('--quiet', '-q', is_flag=True, help='Make file_contexts generator quiet')
@click.option('--verbose', '-v', is_flag=True, help='Verbose log output')
def main(all_entries: bool, bin_only: bool, fstype: str, partition: str, contexts: str,
         threads: Optional[int], quiet: bool, verbose: bool):
    """Generate missing file_contexts entries for an extracted partition"""
    if verbose:
        set_console_level('DEBUG')

    try:
        config = GeneratorConfig.create(
            mode=resolve_mode(all_entries, bin_only, click.get_current_context().meta.get('config_mode')),
            fstype=fstype,
            extracted_dir=partition,
            file_contexts=contexts,
            threads=threads,
            silent=quiet,
        )
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    try:
        stats = process_file_contexts(config)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    logger.info(
        f"Done: {stats.written_entries}/{stats.missing_entries} entries written "
        f"for {stats.total_paths} paths in {stats.processing_time:.2f}s"
    )

if __name__ == '__main__':
    main()
