#!/usr/bin/env python3
#
# Copyright (c) 2020-2021 Tatu Ylonen.  See LICENSE and https://ylonen.org

from setuptools import setup

with open("README.md", "r") as f:
    long_description = f.read()

setup(name="wikiscan",
      version="0.1.0",
      description="Lexical extraction of templates, arguments and HTML-like tags from wikitext",
      long_description=long_description,
      long_description_content_type="text/markdown",
      author="Tatu Ylonen",
      author_email="ylo@clausal.com",
      license="MIT",
      scripts=[],
      packages=["wikiscan"],
      package_dir={"": "src"},
      python_requires=">=3.9",
      install_requires=["requests"],
      extras_require={"test": ["pytest"]},
      keywords=[
          "wikipedia",
          "wikitext",
          "mediawiki",
          "templates",
          "data extraction",
      ],
      classifiers=[
          "Development Status :: 3 - Alpha",
          "Intended Audience :: Developers",
          "License :: OSI Approved :: MIT License",
          "Natural Language :: English",
          "Operating System :: OS Independent",
          "Programming Language :: Python",
          "Programming Language :: Python :: 3 :: Only",
          "Topic :: Text Processing",
          "Topic :: Text Processing :: Markup",
          ])
