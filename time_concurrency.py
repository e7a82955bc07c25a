#!/usr/bin/env python3
"""
Barrier Timer — Concurrent Execution Demo
=========================================
Thin entry-point. All logic lives in barrier_timer.runner.cli.

Usage:
    python3 time_concurrency.py                       # 10 workers x 200 ms
    python3 time_concurrency.py -n 50 --work-ms 20    # 50 workers x 20 ms
    python3 time_concurrency.py --results-dir results/run1
"""

from barrier_timer.runner.cli import main

if __name__ == "__main__":
    main()
