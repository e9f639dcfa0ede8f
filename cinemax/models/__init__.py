from cinemax.models.movie import Movie, MovieStatus
from cinemax.models.hall import Hall
from cinemax.models.screening import Screening
from cinemax.models.booking import Booking, BookingStatus
