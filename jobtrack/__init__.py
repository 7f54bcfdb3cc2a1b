# JobTrack - Job Application Tracker
"""
JobTrack - A personal job application tracker.

Record applications, follow them through the hiring pipeline,
and review the search on an analytics dashboard.
"""

__version__ = "0.1.0"
__author__ = "JobTrack"
__description__ = "Job application tracking and analytics"
