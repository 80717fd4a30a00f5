"""Per-year counters backing consignment and freight-bill numbers."""

from django.db import models


class YearlySequence(models.Model):
    """One row per (series, calendar year); last_value only ever grows."""

    class Series(models.TextChoices):
        CONSIGNMENT  = "CONSIGNMENT",  "Consignment"
        FREIGHT_BILL = "FREIGHT_BILL", "Freight Bill"

    series     = models.CharField(max_length=20, choices=Series.choices)
    year       = models.PositiveSmallIntegerField()
    last_value = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["series", "year"], name="uniq_sequence_series_year"),
        ]

    def __str__(self):
        return f"{self.series}/{self.year} @ {self.last_value}"
