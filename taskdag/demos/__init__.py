"""Runnable demonstrations of task graphs, including a small HTTP service."""