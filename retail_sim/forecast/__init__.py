"""
Demand forecast model: converts a price and a set of design choices into a
projected season demand figure, for decision support before a week is
committed.

Modules
-------
positioning : position_effect() — saturating price-positioning curve with a
              small anchoring bump near the reference price.
demand      : price_effect() + design_effect() + forecast_demand() +
              explain_forecast() — the single-product forecast, and
              forecast_product() + project_season_demand() over the catalogue.

Pure functions, no I/O.
"""
