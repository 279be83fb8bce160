"""Blob storage backends and path helpers."""
