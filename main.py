# main.py
import logging
import os
import sys
from pathlib import Path

import pandas as pd

from premier.core import ConfigLoader, setup_logging
from premier.technical_analysis.factory import create_from_config
from premier.technical_analysis.validation import (
    DEFAULT_TOLERANCE, load_bars_csv, run_indicator, compare_with_reference
)


def main(config_path=None) -> int:
    print("Starting Premier indicator run...")

    # --- 1. System Initialization ---
    project_root = Path(__file__).resolve().parent
    config_path = Path(config_path) if config_path else project_root / 'config.yml'
    config_loader = ConfigLoader(config_path=str(config_path))

    log_config = config_loader.get('logging')
    if log_config:
        file_handler = log_config.get('handlers', {}).get('file')
        if file_handler:
            os.makedirs(project_root / os.path.dirname(file_handler['filename']), exist_ok=True)
    setup_logging(log_config)

    validation_settings = config_loader.get('validation', {})
    indicators = create_from_config(config_loader.indicator_specs())
    if not indicators:
        logging.error("FATAL: No indicators configured. Nothing to run.")
        return 1

    # --- 2. Data Loading ---
    bars_csv = project_root / validation_settings['bars_csv']
    frame = load_bars_csv(bars_csv)
    if frame.empty:
        logging.error(f"FATAL: No bars found in {bars_csv}.")
        return 1

    # --- 3. Replay and Reference Comparison ---
    reference_column = validation_settings.get('reference_column')
    tolerance = validation_settings.get('tolerance', DEFAULT_TOLERANCE)

    outputs = {}
    failures = []
    for name, indicator in indicators.items():
        logging.info(f"Replaying {len(frame)} bars through {name}...")
        outputs[name] = run_indicator(indicator, frame)

        if reference_column and reference_column.lower() in frame.columns:
            result = compare_with_reference(indicator, frame, reference_column, tolerance)
            print(result)
            if not result.passed:
                failures.append(name)

    # --- 4. Save Results ---
    output_csv = validation_settings.get('output_csv')
    if output_csv:
        output_path = project_root / output_csv
        output_path.parent.mkdir(parents=True, exist_ok=True)
        result_df = pd.concat([frame[['timestamp']] if 'timestamp' in frame.columns else frame[[]],
                               pd.DataFrame(outputs)], axis=1)
        result_df.to_csv(output_path, index=False)
        logging.info(f"Indicator values saved to: {output_path}")

    if failures:
        logging.warning(f"Reference comparison failed for: {', '.join(failures)}")
        return 1

    print("Run completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else None))
