"""Run-level guards: the instance lock and the download retry policy."""
