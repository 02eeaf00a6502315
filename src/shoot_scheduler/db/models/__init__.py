from .schedule import ShootSchedule

__all__ = ["ShootSchedule"]
