#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Render Figma document snapshots or serve live viewers.
"""

import figma_live_viewer.cli


if __name__ == "__main__":
	figma_live_viewer.cli.main()
