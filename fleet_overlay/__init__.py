"""
Host for an AR fleet overlay: aligns a device's tracking frame with the
fleet world frame from robot-mounted fiducials, and reconstructs and stacks
scheduled robot trajectories for display.
"""
