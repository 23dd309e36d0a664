#!/usr/bin/env python

"""
    boxprint
    ========

    boxprint renders HTML and CSS boxes to PNG images and PDF documents.

"""

from setuptools import setup

setup()
