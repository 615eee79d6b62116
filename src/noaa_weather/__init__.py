"""Fetch and decode NOAA METAR weather reports."""
