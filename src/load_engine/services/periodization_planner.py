"""PeriodizationPlanner: macrocycle → mesocycles → microcycles, plus routines."""

from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import date, timedelta
from typing import Callable

from load_engine.exceptions import ConflictError, NotFoundError, StorageError, ValidationError
from load_engine.math.periodization import (
    MesocycleBlock,
    allocate_mesocycles,
    default_periodization_type,
    phase_sequence,
    week_start,
    week_targets,
    weeks_from_months,
)
from load_engine.models.deload import DeloadScheduleConfig
from load_engine.models.enums import (
    MAX_TRAINING_FREQUENCY,
    MESOCYCLE_WEEKS,
    MIN_DELOAD_FREQUENCY,
    MIN_TRAINING_FREQUENCY,
    MesocyclePhase,
    TrainingGoal,
    TrainingLevel,
)
from load_engine.models.plan import (
    ActivePlanView,
    Macrocycle,
    Mesocycle,
    Microcycle,
    PlanOptions,
    PlanResult,
    WorkoutRoutine,
)
from load_engine.repositories.base import PlanRepository
from load_engine.services.routine_templates import build_routine

logger = logging.getLogger(__name__)


def _uuid() -> str:
    return uuid.uuid4().hex


class PeriodizationPlanner:
    """Generates and activates periodized plans.

    Persistence happens in three steps: the macrocycle is saved inactive,
    its routines are saved, then the repository atomically activates it and
    deactivates any previous plan. A failure at any step leaves the previous
    active plan untouched.
    """

    def __init__(
        self,
        plans: PlanRepository,
        id_factory: Callable[[], str] = _uuid,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._plans = plans
        self._new_id = id_factory
        self._today = today

    def create_plan(
        self,
        user_id: str,
        name: str,
        goal: TrainingGoal,
        level: TrainingLevel,
        frequency: int,
        duration_months: int,
        start_date: date,
        options: PlanOptions | None = None,
    ) -> PlanResult:
        """Build, persist and activate a plan.

        Raises:
            ValidationError: On invalid parameters.
            ConflictError: If ``options.replace_active`` is False and the user
                already has an active plan.
            StorageError: If any persistence step fails.
        """
        options = options or PlanOptions()
        self._validate(user_id, name, frequency, duration_months, options)

        if not options.replace_active and self._plans.get_active(user_id) is not None:
            raise ConflictError(f"User {user_id} already has an active macrocycle")

        macrocycle = self._build_macrocycle(
            user_id, name, goal, level, frequency, duration_months, start_date, options
        )

        try:
            self._plans.save_macrocycle(macrocycle)
        except StorageError:
            logger.error("Saving macrocycle %s failed; no routines generated", macrocycle.id)
            raise

        routines = self._build_routines(macrocycle)
        try:
            self._plans.save_routines(routines)
            active = self._plans.activate(user_id, macrocycle.id)
        except StorageError:
            logger.error("Persisting plan %s failed; rolling back", macrocycle.id)
            self._compensate(macrocycle.id)
            raise

        logger.info(
            "Created %d-week %s plan %s for %s (%d mesocycles, %d deload)",
            active.duration_weeks,
            active.periodization_type.name.lower(),
            active.id,
            user_id,
            len(active.meso_cycles),
            len(active.deload_mesocycles),
        )
        return PlanResult(macrocycle=active, routines=tuple(routines))

    def activate_plan(
        self, user_id: str, macrocycle_id: str, replace_active: bool = True
    ) -> Macrocycle:
        """Make an existing plan the active one.

        Raises:
            NotFoundError: If the plan does not exist for the user.
            ConflictError: If another plan is active and replace_active is False.
        """
        current = self._plans.get_active(user_id)
        if current is not None and current.id == macrocycle_id:
            return current
        if current is not None and not replace_active:
            raise ConflictError(f"User {user_id} already has active macrocycle {current.id}")
        return self._plans.activate(user_id, macrocycle_id)

    def get_active_plan(self, user_id: str, as_of: date | None = None) -> ActivePlanView:
        """Where the user is inside their active plan on *as_of* (default today)."""
        try:
            macrocycle = self._plans.get_active(user_id)
        except StorageError as exc:
            logger.warning("Active plan lookup failed for %s: %s", user_id, exc)
            return ActivePlanView()
        if macrocycle is None:
            return ActivePlanView()

        day = as_of or self._today()
        mesocycle = macrocycle.mesocycle_on(day)
        if mesocycle is None:
            return ActivePlanView(macrocycle=macrocycle)
        microcycle = next((m for m in mesocycle.micro_cycles if m.contains(day)), None)
        routine = self._plans.routine_for_mesocycle(mesocycle.id)
        return ActivePlanView(
            macrocycle=macrocycle,
            current_mesocycle=mesocycle,
            current_microcycle=microcycle,
            current_routine=routine,
        )

    def get_macrocycle(self, macrocycle_id: str) -> Macrocycle:
        macrocycle = self._plans.get_macrocycle(macrocycle_id)
        if macrocycle is None:
            raise NotFoundError(f"Macrocycle {macrocycle_id} not found")
        return macrocycle

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(
        user_id: str, name: str, frequency: int, duration_months: int, options: PlanOptions
    ) -> None:
        if not user_id:
            raise ValidationError("user_id must be non-empty")
        if not name or not name.strip():
            raise ValidationError("Plan name must be non-empty")
        if not MIN_TRAINING_FREQUENCY <= frequency <= MAX_TRAINING_FREQUENCY:
            raise ValidationError(
                f"frequency must be {MIN_TRAINING_FREQUENCY}-{MAX_TRAINING_FREQUENCY} "
                f"sessions/week, got {frequency}"
            )
        if duration_months < 1:
            raise ValidationError(f"duration_months must be >= 1, got {duration_months}")
        if options.deload_frequency is not None and options.deload_frequency < MIN_DELOAD_FREQUENCY:
            raise ValidationError(
                f"deload_frequency must be >= {MIN_DELOAD_FREQUENCY}, "
                f"got {options.deload_frequency}"
            )

    def _build_macrocycle(
        self,
        user_id: str,
        name: str,
        goal: TrainingGoal,
        level: TrainingLevel,
        frequency: int,
        duration_months: int,
        start_date: date,
        options: PlanOptions,
    ) -> Macrocycle:
        try:
            total_weeks = weeks_from_months(duration_months)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        schedule = DeloadScheduleConfig.for_level(level, goal)
        deload_frequency = options.deload_frequency or schedule.frequency
        periodization_type = options.periodization_type or default_periodization_type(level, goal)

        blocks = allocate_mesocycles(
            total_weeks,
            phase_sequence(periodization_type, goal),
            MESOCYCLE_WEEKS[level],
            deload_frequency,
            include_deloads=options.include_deloads,
        )

        macrocycle_id = self._new_id()
        mesocycles = tuple(
            self._build_mesocycle(macrocycle_id, block, start_date, schedule) for block in blocks
        )
        return Macrocycle(
            id=macrocycle_id,
            user_id=user_id,
            name=name.strip(),
            duration_weeks=total_weeks,
            meso_cycles=mesocycles,
            primary_goal=goal,
            training_level=level,
            periodization_type=periodization_type,
            frequency=frequency,
            start_date=start_date,
            end_date=start_date + timedelta(weeks=total_weeks, days=-1),
            deload_schedule=dataclasses.replace(schedule, frequency=deload_frequency),
            is_active=False,
        )

    def _build_mesocycle(
        self,
        macrocycle_id: str,
        block: MesocycleBlock,
        plan_start: date,
        schedule: DeloadScheduleConfig,
    ) -> Mesocycle:
        mesocycle_id = self._new_id()
        micro_cycles: list[Microcycle] = []
        for offset, week_number in enumerate(range(block.start_week, block.end_week + 1)):
            start = week_start(plan_start, week_number)
            multiplier, rir = week_targets(block.phase, offset)
            micro_cycles.append(
                Microcycle(
                    id=self._new_id(),
                    mesocycle_id=mesocycle_id,
                    week_number=week_number,
                    start_date=start,
                    end_date=start + timedelta(days=6),
                    is_deload=block.is_deload,
                    volume_multiplier=multiplier,
                    target_rir=rir,
                )
            )
        return Mesocycle(
            id=mesocycle_id,
            macrocycle_id=macrocycle_id,
            phase=block.phase,
            start_date=micro_cycles[0].start_date,
            end_date=micro_cycles[-1].end_date,
            micro_cycles=tuple(micro_cycles),
            includes_deload=block.is_deload,
            deload_strategy=schedule.strategy if block.is_deload else None,
        )

    def _build_routines(self, macrocycle: Macrocycle) -> list[WorkoutRoutine]:
        routines: list[WorkoutRoutine] = []
        previous_phase: MesocyclePhase | None = None
        for mesocycle in macrocycle.meso_cycles:
            routines.append(
                build_routine(
                    self._new_id(),
                    macrocycle.user_id,
                    mesocycle,
                    macrocycle.training_level,
                    macrocycle.primary_goal,
                    macrocycle.frequency,
                    reference_phase=previous_phase,
                )
            )
            if not mesocycle.includes_deload:
                previous_phase = mesocycle.phase
        return routines

    def _compensate(self, macrocycle_id: str) -> None:
        try:
            self._plans.delete_macrocycle(macrocycle_id)
        except StorageError:
            logger.exception("Rollback of macrocycle %s failed; it remains inactive", macrocycle_id)
