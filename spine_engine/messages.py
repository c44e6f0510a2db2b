"""
User-facing warning and recommendation texts.

Kept in one place so a presentation layer can key translations off them.
Warnings that start with "DANGER" are safety-critical.
"""

# --- Warnings ---

DANGER_LIGHT_ARROW = "DANGER! Arrow is very light for this draw weight - it can damage the bow or break on the shot"
LIGHT_ARROW = "Light arrow - consider adding weight for the safety of the bow"
DANGER_TOO_WEAK = "DANGER! Arrow is far too weak - risk of shaft fracture and bow damage"
DANGER_TOO_STIFF = "DANGER! Arrow is far too stiff - expect erratic flight and contact with the riser"
EXTREME_SPEED = "Extreme speed - make sure your equipment can handle these forces"

# --- Recommendations ---

STIFFER_SPINE = "Consider a stiffer spine (lower spine number)"
WEAKER_SPINE = "Consider a more flexible spine (higher spine number)"
ADD_MASS = "The arrow is light for the draw weight. Add weight for better efficiency"
REDUCE_MASS = "The arrow is heavy for the draw weight. Reduce weight for more speed"
LOW_SPEED = "Speed is low. Reduce arrow weight or improve bow efficiency"
HIGH_SPEED = "Speed is high. Verify your equipment is rated for these forces"
LOW_FOC = "Low FOC (<7%). The arrow may be unstable at long range. Add weight up front"
HIGH_FOC = "High FOC (>16%). Good for penetration, but the arrow will drop faster"
FUTURE_DRAW_WEIGHT = "Consider a stiffer spine if you plan to raise the draw weight later"
COLD_TEMPERATURE = "Cold conditions: carbon shafts behave stiffer, a slightly weaker spine may tune better"
HOT_TEMPERATURE = "Hot conditions: carbon shafts behave weaker, a slightly stiffer spine may tune better"
