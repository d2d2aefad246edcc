'''
Fits Linearly Transformed Cosine (LTC) lobes to a BRDF over a grid of view angles
and roughness values, and exports the resulting tables for real-time area lighting.

For every (roughness, cos(theta)) cell the LTC error against the BRDF is estimated with
multiple importance sampling and minimised with a downhill simplex, starting from the
solution of a neighbouring cell.

Settings are read from data/config/config.yaml unless another file is given with --config.
'''

import sys
import time
import argparse

from ltcfit.model.brdfs import BrdfFactory
from ltcfit.model.fitter import fit_table
from ltcfit.model.packing import pack_table
from ltcfit.model.export import save_ltc_table, write_tab_c, write_js
from ltcfit.utilities.config import Config
from ltcfit.utilities.utils import conditional_print

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Fit LTC lookup tables to a BRDF')
    parser.add_argument(
        '--config',
        type=str,
        help='Path to configuration file'
    )
    parser.add_argument(
        '--brdf',
        type=str,
        help=f'BRDF to fit, overrides the config file. One of: {BrdfFactory.available()}'
    )
    parser.add_argument(
        '--silent',
        action='store_true',
        help='Suppress console output'
    )
    return parser.parse_args(argv)

def export_tables(table, tex1, tex2, config):
    """Run the exporters selected in the config and return the written paths."""
    config.locations.ensure_directories_exist(config.output_directory)
    writers = {
        'npy': (f"{config.output_name}.npy", lambda path: save_ltc_table(path, table, tex1, tex2)),
        'c': (f"{config.output_name}.inc", lambda path: write_tab_c(path, table)),
        'js': (f"{config.output_name}.js", lambda path: write_js(path, tex1, tex2)),
    }

    paths = []
    for fmt in config.export_formats:
        filename, writer = writers[fmt]
        path = config.locations.get_ltc_table_path(filename, config.output_directory)
        writer(path)
        conditional_print(config.silent_mode, f"Saved {fmt} table to {path}")
        paths.append(path)
    return paths

def main(argv=None):
    args = parse_args(argv)

    full_run_start_time = time.time()

    try:
        config = Config(config_path=args.config)
        if args.brdf:
            config.brdf = args.brdf
            config.output_name = config.config_data.get('output_name', f"ltc_{args.brdf}")
        if args.silent:
            config.silent_mode = True
        config.validate()
        brdf = BrdfFactory.create(config.brdf)
    except (FileNotFoundError, ValueError) as e:
        print(f"Failed to set up fit: {e}")
        sys.exit(1)

    conditional_print(config.silent_mode, f"BRDF: {brdf.name}")
    conditional_print(config.silent_mode, f"Table size: {config.table_size} x {config.table_size}")
    conditional_print(config.silent_mode, f"Samples per cell: {config.n_samples ** 2}")

    # fit
    table = fit_table(brdf, config)

    # pack tables (texture representation)
    tex1, tex2 = pack_table(table)

    export_tables(table, tex1, tex2, config)

    conditional_print(config.silent_mode, f"Full run time: {time.time() - full_run_start_time:.2f} seconds")
    return table

if __name__ == "__main__":
    main()
