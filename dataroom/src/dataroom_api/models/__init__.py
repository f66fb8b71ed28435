# coding: utf-8

"""API request/response models."""
