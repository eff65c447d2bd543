"""Gradio user interface for HugFusion."""
