# mirror <sysexits.h>
EXIT_OK = 0  # Normal success
EXIT_FAILURE = 1  # Failed run: coverage below minimum or an error during the run
EXIT_CONFIG = 78  # Invalid configuration (e.g., non-numeric minimum-coverage)
