"""Internship Tracker package.

Feature modules (users, attendance, leaves, journals, reports, ...) sit behind a
thin Flask JSON controller layer over service/repository layers.
"""
