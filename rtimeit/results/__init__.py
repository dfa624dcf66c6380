# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Measurement parsing, ranking and rendering.

  - models: MeasurementResult and RankedResult
  - parser: Criterion report lines to MeasurementResults
  - presenter: ranking and the comparison table / JSON
"""
